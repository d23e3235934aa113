"""Shared helpers."""

from flowbuilder.utils.identifiers import generate_edge_id, generate_node_id, generate_suffix

__all__ = ["generate_edge_id", "generate_node_id", "generate_suffix"]

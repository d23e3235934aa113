"""FastAPI dependencies."""

from fastapi import Request

from flowbuilder.services.graph_store import GraphStore


def get_graph_store(request: Request) -> GraphStore:
    """The application's graph store, constructed at startup."""
    return request.app.state.graph_store

"""Services for the workflow builder."""

from flowbuilder.services.errors import (
    AuthRequired,
    GraphStoreError,
    NotFound,
    PersistenceFailure,
    ValidationFailure,
)
from flowbuilder.services.change_applier import apply_edge_changes, apply_node_changes
from flowbuilder.services.connection_validator import ConnectionValidator
from flowbuilder.services.graph_store import GraphStore
from flowbuilder.services.node_registry import ConfigField, config_fields, default_data
from flowbuilder.services.session import SessionProvider, StaticSessionProvider
from flowbuilder.services.templates import WorkflowTemplate, clone_graph, list_templates

__all__ = [
    "GraphStore",
    "ConnectionValidator",
    "apply_node_changes",
    "apply_edge_changes",
    "default_data",
    "config_fields",
    "ConfigField",
    "SessionProvider",
    "StaticSessionProvider",
    "WorkflowTemplate",
    "list_templates",
    "clone_graph",
    # Errors
    "GraphStoreError",
    "AuthRequired",
    "NotFound",
    "ValidationFailure",
    "PersistenceFailure",
]

"""Database module."""

from flowbuilder.db.database import close_database, get_db, init_database
from flowbuilder.db.workflow_gateway import (
    InMemoryWorkflowGateway,
    SQLiteWorkflowGateway,
    WorkflowGateway,
)

__all__ = [
    "get_db",
    "init_database",
    "close_database",
    "WorkflowGateway",
    "SQLiteWorkflowGateway",
    "InMemoryWorkflowGateway",
]

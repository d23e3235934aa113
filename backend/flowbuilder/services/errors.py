"""Errors raised by the graph store and its collaborators."""


class GraphStoreError(Exception):
    """Base exception for graph store errors."""

    def __init__(self, message: str, retriable: bool = False):
        super().__init__(message)
        self.retriable = retriable


class AuthRequired(GraphStoreError):
    """No active session for an operation that needs one."""

    pass


class NotFound(GraphStoreError):
    """Workflow, node, edge or template id is absent."""

    pass


class ValidationFailure(GraphStoreError):
    """A connection or node payload breaks the graph rules."""

    pass


class PersistenceFailure(GraphStoreError):
    """Transport or storage error from the persistence gateway."""

    def __init__(self, message: str, retriable: bool = True):
        super().__init__(message, retriable=retriable)

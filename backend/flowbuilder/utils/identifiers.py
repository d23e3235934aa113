"""ID generation utilities for graph elements."""

import secrets
import string
from collections.abc import Container

# URL-safe alphabet: 64 symbols
ID_ALPHABET = string.ascii_letters + string.digits + "_-"
SUFFIX_LENGTH = 6


def generate_suffix(length: int = SUFFIX_LENGTH) -> str:
    """Generate a short random URL-safe string."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def _unique(prefix: str, taken: Container[str]) -> str:
    while True:
        candidate = f"{prefix}-{generate_suffix()}"
        if candidate not in taken:
            return candidate


def generate_node_id(kind: str, taken: Container[str] = ()) -> str:
    """Generate a ``<kind>-<suffix>`` node ID not already in ``taken``."""
    return _unique(kind, taken)


def generate_edge_id(taken: Container[str] = ()) -> str:
    """Generate an ``edge-<suffix>`` edge ID not already in ``taken``."""
    return _unique("edge", taken)

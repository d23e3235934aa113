"""ChangeApplier - folds batches of edit records over node and edge lists.

The editing surface reports continuous edits (drags, selection, measured
sizes, deletions) as ordered change batches. These functions compute the
next list from the current one without touching their inputs: the same
list and batch always give the same result.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from flowbuilder.models.change import (
    DimensionsChange,
    PositionChange,
    RemoveChange,
    SelectChange,
    parse_change,
)
from flowbuilder.models.edge import Edge
from flowbuilder.models.node import Node

logger = logging.getLogger(__name__)

T = TypeVar("T", Node, Edge)

RawChange = dict[str, Any] | BaseModel


def _index_of(items: Sequence[Node | Edge], item_id: str) -> int | None:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return None


def _apply(changes: Iterable[RawChange], items: Sequence[T], allow_geometry: bool) -> list[T]:
    result = list(items)

    for raw in changes:
        change = parse_change(raw)
        if change is None:
            logger.debug(f"Skipping unknown change record: {raw!r}")
            continue

        index = _index_of(result, change.id)
        if index is None:
            continue
        current = result[index]

        if isinstance(change, RemoveChange):
            del result[index]
        elif isinstance(change, SelectChange):
            result[index] = current.model_copy(update={"selected": change.selected})
        elif isinstance(change, PositionChange):
            if allow_geometry and change.position is not None:
                result[index] = current.model_copy(
                    update={"position": change.position.model_copy()}
                )
        elif isinstance(change, DimensionsChange):
            if allow_geometry and change.dimensions is not None:
                result[index] = current.model_copy(
                    update={
                        "width": change.dimensions.width,
                        "height": change.dimensions.height,
                    }
                )

    return result


def apply_node_changes(changes: Iterable[RawChange], nodes: Sequence[Node]) -> list[Node]:
    """Apply a change batch to an ordered node list.

    Args:
        changes: Change records (raw dicts or parsed models), applied in order
        nodes: The current node list (left untouched)

    Returns:
        The next node list. Records for ids that are not in the list and
        records of unknown type are ignored.
    """
    return _apply(changes, nodes, allow_geometry=True)


def apply_edge_changes(changes: Iterable[RawChange], edges: Sequence[Edge]) -> list[Edge]:
    """Apply a change batch to an ordered edge list.

    Edges have no geometry of their own, so ``position`` and ``dimensions``
    records are no-ops here.
    """
    return _apply(changes, edges, allow_geometry=False)

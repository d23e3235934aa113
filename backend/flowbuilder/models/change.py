"""Pydantic models for incremental edit records emitted by the editing surface.

A change batch is an ordered list of these records. Records are tagged by
``type``; records of an unknown type are skipped by the change applier so
newer editing surfaces can send kinds this backend does not know yet.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from flowbuilder.models.node import Dimensions, Position


class PositionChange(BaseModel):
    """Move a node."""

    type: Literal["position"] = "position"
    id: str
    position: Position | None = None
    dragging: bool | None = None


class RemoveChange(BaseModel):
    """Drop a node or edge."""

    type: Literal["remove"] = "remove"
    id: str


class SelectChange(BaseModel):
    """Toggle the (non-persisted) selection flag."""

    type: Literal["select"] = "select"
    id: str
    selected: bool


class DimensionsChange(BaseModel):
    """Record the measured size of a node (non-persisted)."""

    type: Literal["dimensions"] = "dimensions"
    id: str
    dimensions: Dimensions | None = None


Change = Annotated[
    PositionChange | RemoveChange | SelectChange | DimensionsChange,
    Field(discriminator="type"),
]

KNOWN_CHANGE_TYPES = frozenset({"position", "remove", "select", "dimensions"})

_change_adapter: TypeAdapter[Change] = TypeAdapter(Change)


def parse_change(raw: Any) -> Change | None:
    """Parse a raw change record.

    Returns None for records of unknown type and for anything that is not
    a mapping or a model.
    """
    if isinstance(raw, (PositionChange, RemoveChange, SelectChange, DimensionsChange)):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        return None
    record_type = raw.get("type")
    if not isinstance(record_type, str) or record_type not in KNOWN_CHANGE_TYPES:
        return None
    return _change_adapter.validate_python(dict(raw))


class ChangeBatch(BaseModel):
    """Request model for a batch of change records."""

    changes: list[dict[str, Any]]

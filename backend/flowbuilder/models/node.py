"""Pydantic models for Node instances and their per-kind data payloads."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class NodeKind(str, Enum):
    """Supported node kinds on the workflow canvas."""

    TRIGGER = "trigger"
    ACTION = "action"
    CONDITION = "condition"


class TriggerType(str, Enum):
    WEBHOOK = "webhook"
    SCHEDULE = "schedule"
    EVENT = "event"


class ActionType(str, Enum):
    HTTP = "http"
    EMAIL = "email"
    DATABASE = "database"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not-equals"
    GREATER_THAN = "greater-than"
    LESS_THAN = "less-than"
    CONTAINS = "contains"


class Position(BaseModel):
    """Canvas coordinates of a node."""

    x: float
    y: float


class Dimensions(BaseModel):
    """Measured size of a rendered node."""

    width: float
    height: float


class TriggerData(BaseModel):
    """Configuration payload of a trigger node."""

    name: str
    trigger_type: TriggerType = Field(alias="triggerType")
    config: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True, "use_enum_values": True, "extra": "allow"}


class ActionData(BaseModel):
    """Configuration payload of an action node."""

    name: str
    action_type: ActionType = Field(alias="actionType")
    config: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True, "use_enum_values": True, "extra": "allow"}


class Condition(BaseModel):
    """A single comparison evaluated by a condition node."""

    left: str = ""
    operator: ConditionOperator = ConditionOperator.EQUALS
    right: str = ""

    model_config = {"use_enum_values": True}


class ConditionData(BaseModel):
    """Configuration payload of a condition node."""

    name: str
    condition: Condition = Field(default_factory=Condition)

    model_config = {"extra": "allow"}


NodeData = TriggerData | ActionData | ConditionData

# Kind -> payload type. Keep in sync with NodeKind; the registry checks this
# mapping is exhaustive at import time.
NODE_DATA_MODELS: dict[NodeKind, type[BaseModel]] = {
    NodeKind.TRIGGER: TriggerData,
    NodeKind.ACTION: ActionData,
    NodeKind.CONDITION: ConditionData,
}


class Node(BaseModel):
    """A node instance in the workflow graph.

    ``selected``, ``width`` and ``height`` are view state reported by the
    editing surface. They live on the canonical node so change batches can
    update them, but they are never persisted.
    """

    id: str
    kind: NodeKind
    position: Position
    data: NodeData
    selected: bool = Field(default=False, exclude=True)
    width: float | None = Field(default=None, exclude=True)
    height: float | None = Field(default=None, exclude=True)

    model_config = {"use_enum_values": True}

    @model_validator(mode="before")
    @classmethod
    def parse_data_for_kind(cls, values: Any) -> Any:
        """Parse a raw ``data`` mapping with the payload type of ``kind``."""
        if not isinstance(values, dict):
            return values
        kind = values.get("kind")
        data = values.get("data")
        if kind is None or not isinstance(data, dict):
            return values
        model = NODE_DATA_MODELS.get(NodeKind(kind))
        return {**values, "data": model.model_validate(data)}

    @model_validator(mode="after")
    def check_data_matches_kind(self) -> "Node":
        expected = NODE_DATA_MODELS[NodeKind(self.kind)]
        if not isinstance(self.data, expected):
            raise ValueError(
                f"Node '{self.id}' of kind '{self.kind}' requires {expected.__name__} data, "
                f"got {type(self.data).__name__}"
            )
        return self


class NodeCreate(BaseModel):
    """Request model for adding a node."""

    kind: NodeKind
    position: Position


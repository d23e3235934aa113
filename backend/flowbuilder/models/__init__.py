"""Pydantic models for the workflow builder."""

from flowbuilder.models.change import (
    Change,
    ChangeBatch,
    DimensionsChange,
    PositionChange,
    RemoveChange,
    SelectChange,
    parse_change,
)
from flowbuilder.models.edge import CONDITION_HANDLES, Edge, EdgeCreate, EdgeDraft
from flowbuilder.models.node import (
    NODE_DATA_MODELS,
    ActionData,
    ActionType,
    Condition,
    ConditionData,
    ConditionOperator,
    Dimensions,
    Node,
    NodeCreate,
    NodeData,
    NodeKind,
    Position,
    TriggerData,
    TriggerType,
)
from flowbuilder.models.workflow import (
    CreateFromTemplateRequest,
    NodeGraph,
    Workflow,
    WorkflowCreate,
    WorkflowMetaUpdate,
    WorkflowRecordCreate,
    WorkflowSummary,
    WorkflowUpdate,
)

__all__ = [
    # Nodes
    "Node",
    "NodeCreate",
    "NodeData",
    "NodeKind",
    "NODE_DATA_MODELS",
    "Position",
    "Dimensions",
    "TriggerData",
    "TriggerType",
    "ActionData",
    "ActionType",
    "ConditionData",
    "Condition",
    "ConditionOperator",
    # Edges
    "Edge",
    "EdgeCreate",
    "EdgeDraft",
    "CONDITION_HANDLES",
    # Workflows
    "NodeGraph",
    "Workflow",
    "WorkflowCreate",
    "WorkflowMetaUpdate",
    "WorkflowRecordCreate",
    "WorkflowSummary",
    "WorkflowUpdate",
    "CreateFromTemplateRequest",
    # Change batches
    "Change",
    "ChangeBatch",
    "PositionChange",
    "RemoveChange",
    "SelectChange",
    "DimensionsChange",
    "parse_change",
]

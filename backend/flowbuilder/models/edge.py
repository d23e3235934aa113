"""Pydantic models for Edge instances."""

from pydantic import BaseModel, Field

CONDITION_HANDLES = ("true", "false")


class EdgeCreate(BaseModel):
    """Request model for connecting two nodes."""

    source_node_id: str = Field(alias="sourceNodeId")
    target_node_id: str = Field(alias="targetNodeId")
    source_handle: str | None = Field(default=None, alias="sourceHandle")

    model_config = {"populate_by_name": True}


class EdgeDraft(BaseModel):
    """A validated connection, ready for id assignment and insertion."""

    source_node_id: str
    target_node_id: str
    source_handle: str | None = None
    kind: str = "default"


class Edge(BaseModel):
    """A directed connection between two nodes of one graph."""

    id: str
    source_node_id: str = Field(alias="sourceNodeId")
    target_node_id: str = Field(alias="targetNodeId")
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    kind: str = "default"
    selected: bool = Field(default=False, exclude=True)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_draft(cls, edge_id: str, draft: EdgeDraft) -> "Edge":
        return cls(
            id=edge_id,
            source_node_id=draft.source_node_id,
            target_node_id=draft.target_node_id,
            source_handle=draft.source_handle,
            kind=draft.kind,
        )

    def touches(self, node_id: str) -> bool:
        """Whether this edge starts or ends at ``node_id``."""
        return self.source_node_id == node_id or self.target_node_id == node_id

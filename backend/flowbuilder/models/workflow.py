"""Pydantic models for Workflows (a named, persisted node graph)."""

from typing import Any

from pydantic import BaseModel, model_validator
from pydantic import Field as PydanticField

from flowbuilder.models.edge import Edge
from flowbuilder.models.node import Node


class NodeGraph(BaseModel):
    """The ordered node and edge lists of one workflow."""

    nodes: list[Node] = []
    edges: list[Edge] = []

    @classmethod
    def empty(cls) -> "NodeGraph":
        return cls(nodes=[], edges=[])

    @model_validator(mode="after")
    def check_integrity(self) -> "NodeGraph":
        """Reject duplicate ids and edges pointing at missing nodes."""
        node_ids = [n.id for n in self.nodes]
        if len(set(node_ids)) != len(node_ids):
            raise ValueError("Node ids must be unique within a graph")
        edge_ids = [e.id for e in self.edges]
        if len(set(edge_ids)) != len(edge_ids):
            raise ValueError("Edge ids must be unique within a graph")
        known = set(node_ids)
        for edge in self.edges:
            if edge.source_node_id not in known:
                raise ValueError(f"Edge {edge.id} references unknown source node: {edge.source_node_id}")
            if edge.target_node_id not in known:
                raise ValueError(f"Edge {edge.id} references unknown target node: {edge.target_node_id}")
        return self

    def get_node(self, node_id: str) -> Node | None:
        """Find a node by ID."""
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def get_edge(self, edge_id: str) -> Edge | None:
        for e in self.edges:
            if e.id == edge_id:
                return e
        return None

    def to_storage(self) -> dict[str, Any]:
        """Serialize to the persisted ``{"nodes": [...], "edges": [...]}`` shape."""
        return self.model_dump(mode="json", by_alias=True)


class WorkflowRecordCreate(BaseModel):
    """Fields supplied when inserting a new workflow record."""

    name: str
    description: str = ""
    graph: NodeGraph = PydanticField(default_factory=NodeGraph.empty)


class WorkflowUpdate(BaseModel):
    """Partial update of a workflow record.

    The graph travels with every update: the stored record is always
    whole-graph-plus-metadata.
    """

    name: str | None = None
    description: str | None = None
    graph: NodeGraph


class Workflow(BaseModel):
    """A named, persisted container for one node graph."""

    id: str
    name: str
    description: str = ""
    graph: NodeGraph = PydanticField(default_factory=NodeGraph.empty)
    created_at: str = PydanticField(alias="createdAt")
    updated_at: str = PydanticField(alias="updatedAt")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def normalize_missing_graph(cls, values: Any) -> Any:
        if isinstance(values, dict) and values.get("graph") is None:
            return {**values, "graph": NodeGraph.empty()}
        return values

    def summary(self) -> "WorkflowSummary":
        return WorkflowSummary(
            id=self.id,
            name=self.name,
            description=self.description,
            node_count=len(self.graph.nodes),
            edge_count=len(self.graph.edges),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class WorkflowSummary(BaseModel):
    """Summary of a workflow for listing."""

    id: str
    name: str
    description: str
    node_count: int = PydanticField(alias="nodeCount")
    edge_count: int = PydanticField(alias="edgeCount")
    created_at: str = PydanticField(alias="createdAt")
    updated_at: str = PydanticField(alias="updatedAt")

    model_config = {"populate_by_name": True}


class WorkflowCreate(BaseModel):
    """Request model for creating an empty workflow."""

    name: str
    description: str = ""


class WorkflowMetaUpdate(BaseModel):
    """Request model for renaming or re-describing a workflow."""

    name: str | None = None
    description: str | None = None


class CreateFromTemplateRequest(BaseModel):
    """Request to create a workflow from a template."""

    template_id: str = PydanticField(alias="templateId")
    name: str | None = None

    model_config = {"populate_by_name": True}

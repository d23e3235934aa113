"""Workflow API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from flowbuilder.api.deps import get_graph_store
from flowbuilder.models import (
    ChangeBatch,
    CreateFromTemplateRequest,
    Edge,
    EdgeCreate,
    Node,
    NodeCreate,
    Workflow,
    WorkflowCreate,
    WorkflowMetaUpdate,
    WorkflowSummary,
)
from flowbuilder.services.graph_store import GraphStore

router = APIRouter()

Store = Annotated[GraphStore, Depends(get_graph_store)]


class CreateWorkflowResponse(BaseModel):
    """Response with the ID of a newly created workflow."""

    id: str


# ==================== Workflows ====================


@router.get("/workflows")
async def list_workflows(store: Store) -> list[WorkflowSummary]:
    """List all workflows, newest first."""
    return await store.list_workflows()


@router.post("/workflows", status_code=201)
async def create_workflow(request: WorkflowCreate, store: Store) -> CreateWorkflowResponse:
    """Create an empty workflow and open it."""
    workflow_id = await store.create_workflow(request.name, request.description)
    return CreateWorkflowResponse(id=workflow_id)


@router.post("/workflows/from-template", status_code=201)
async def create_from_template(
    request: CreateFromTemplateRequest, store: Store
) -> CreateWorkflowResponse:
    """Create a workflow from a template and open it."""
    workflow_id = await store.create_from_template(request.template_id, request.name)
    return CreateWorkflowResponse(id=workflow_id)


@router.get("/workflows/{workflow_id}")
async def load_workflow(workflow_id: str, store: Store) -> Workflow:
    """Load a workflow and make it the open one."""
    return await store.load_workflow(workflow_id)


@router.patch("/workflows/{workflow_id}")
async def update_workflow(workflow_id: str, update: WorkflowMetaUpdate, store: Store) -> Workflow:
    """Update the open workflow's name/description (the graph is saved with it)."""
    return await store.update_workflow_meta(workflow_id, update.name, update.description)


@router.post("/workflows/{workflow_id}/save")
async def save_workflow(workflow_id: str, store: Store) -> Workflow:
    """Persist the open workflow's current graph."""
    return await store.update_workflow_meta(workflow_id)


@router.delete("/workflows/{workflow_id}", status_code=204)
async def delete_workflow(workflow_id: str, store: Store) -> None:
    """Delete a workflow."""
    await store.delete_workflow(workflow_id)


# ==================== Open workflow ====================


@router.get("/workflow")
async def get_open_workflow(store: Store) -> Workflow:
    """Get the open workflow."""
    if store.current_workflow is None:
        raise HTTPException(status_code=404, detail="No workflow is open")
    return store.current_workflow


@router.post("/workflow/nodes", status_code=201)
async def add_node(request: NodeCreate, store: Store) -> Node:
    """Add a node with default configuration."""
    return await store.add_node(request.kind, request.position)


@router.patch("/workflow/nodes/{node_id}")
async def update_node(node_id: str, patch: dict, store: Store) -> Node:
    """Merge a data patch into a node's configuration."""
    return await store.update_node(node_id, patch)


@router.delete("/workflow/nodes/{node_id}", status_code=204)
async def remove_node(node_id: str, store: Store) -> None:
    """Delete a node and its edges."""
    await store.remove_node(node_id)


@router.post("/workflow/edges", status_code=201)
async def connect_nodes(request: EdgeCreate, store: Store) -> Edge:
    """Connect two nodes."""
    return await store.connect(
        request.source_node_id, request.target_node_id, request.source_handle
    )


@router.delete("/workflow/edges/{edge_id}", status_code=204)
async def remove_edge(edge_id: str, store: Store) -> None:
    """Delete an edge."""
    await store.remove_edge(edge_id)


@router.post("/workflow/nodes/changes")
async def apply_node_changes(batch: ChangeBatch, store: Store) -> list[Node]:
    """Apply a batch of node edits from the canvas (not persisted)."""
    return store.apply_node_changes(batch.changes)


@router.post("/workflow/edges/changes")
async def apply_edge_changes(batch: ChangeBatch, store: Store) -> list[Edge]:
    """Apply a batch of edge edits from the canvas (not persisted)."""
    return store.apply_edge_changes(batch.changes)

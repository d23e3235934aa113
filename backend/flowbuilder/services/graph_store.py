"""GraphStore - owner of the open workflow's canonical graph.

Every persisted mutation follows the same shape: read the open workflow,
compute the next graph from it, send the whole graph to the gateway, and
only then commit the result as canonical state. A failed gateway call
leaves the canonical workflow exactly as it was.

There is no locking. Two mutations started before either resolves each
work from the snapshot they read, and the one that commits last wins
(its graph replaces the other's). Change batches from the editing surface
are applied straight to canonical state and are not persisted until the
workflow is saved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from flowbuilder.models.edge import Edge
from flowbuilder.models.node import Node, NodeKind, Position
from flowbuilder.models.workflow import (
    NodeGraph,
    Workflow,
    WorkflowRecordCreate,
    WorkflowSummary,
    WorkflowUpdate,
)
from flowbuilder.services import change_applier, node_registry, templates
from flowbuilder.services.connection_validator import ConnectionValidator
from flowbuilder.services.errors import AuthRequired, NotFound, ValidationFailure
from flowbuilder.services.session import SessionProvider, StaticSessionProvider
from flowbuilder.utils.identifiers import generate_edge_id, generate_node_id

if TYPE_CHECKING:
    from flowbuilder.db.workflow_gateway import WorkflowGateway

logger = logging.getLogger(__name__)


class GraphStore:
    """Single source of truth for the open workflow.

    One instance is constructed per running application and handed to
    whatever needs it (see ``flowbuilder.main``).

    Attributes:
        workflows: Cached summaries for listing screens, newest first
        current_workflow: The open workflow, or None
        is_loading: True while a workflow-level operation is in flight (UI hint only)
        error: Human-readable message of the last failed operation
    """

    def __init__(
        self,
        gateway: WorkflowGateway,
        session: SessionProvider | None = None,
        validator: ConnectionValidator | None = None,
    ) -> None:
        self._gateway = gateway
        self._session = session or StaticSessionProvider()
        self._validator = validator or ConnectionValidator()

        self.workflows: list[WorkflowSummary] = []
        self.current_workflow: Workflow | None = None
        self.is_loading = False
        self.error: str | None = None

    @contextmanager
    def _track(
        self, action: str, loading: bool = False, clear_error: bool = True
    ) -> Iterator[None]:
        """Record the error of a failed operation and re-raise it."""
        if clear_error:
            self.error = None
        if loading:
            self.is_loading = True
        try:
            yield
        except Exception as e:
            self.error = str(e) or f"Failed to {action}"
            logger.warning(f"Failed to {action}: {e}")
            raise
        finally:
            if loading:
                self.is_loading = False

    def _require_open(self) -> Workflow:
        if self.current_workflow is None:
            raise NotFound("No workflow is open")
        return self.current_workflow

    def _replace_summary(self, workflow: Workflow) -> None:
        self.workflows = [
            workflow.summary() if summary.id == workflow.id else summary
            for summary in self.workflows
        ]

    async def _persist_graph(self, workflow: Workflow, graph: NodeGraph) -> Workflow:
        """Send ``graph`` to storage and commit it on success."""
        stored = await self._gateway.update_by_id(workflow.id, WorkflowUpdate(graph=graph))
        if stored is None:
            raise NotFound(f"Workflow '{workflow.id}' not found")

        committed = workflow.model_copy(update={"graph": graph, "updated_at": stored.updated_at})
        self.current_workflow = committed
        self._replace_summary(committed)
        logger.debug(
            f"Committed workflow {workflow.id}: "
            f"{len(graph.nodes)} nodes, {len(graph.edges)} edges"
        )
        return committed

    # ==================== Workflows ====================

    async def list_workflows(self) -> list[WorkflowSummary]:
        """List all workflows, newest first, and refresh the cached list."""
        with self._track("fetch workflows", loading=True):
            records = await self._gateway.list_all()
            self.workflows = [record.summary() for record in records]
            return list(self.workflows)

    async def _create(self, name: str, description: str, graph: NodeGraph) -> str:
        if not await self._session.current_user():
            raise AuthRequired("Not authenticated")

        workflow = await self._gateway.insert(
            WorkflowRecordCreate(name=name, description=description, graph=graph)
        )
        self.workflows = [workflow.summary(), *self.workflows]
        self.current_workflow = workflow
        logger.info(f"Created workflow {workflow.id} ({name!r})")
        return workflow.id

    async def create_workflow(self, name: str, description: str = "") -> str:
        """Create an empty workflow, persist it and open it.

        Returns:
            The new workflow's ID

        Raises:
            AuthRequired: if no user is signed in
            PersistenceFailure: if storage rejects the insert
        """
        with self._track("create workflow", loading=True):
            return await self._create(name, description, NodeGraph.empty())

    async def create_from_template(self, template_id: str, name: str | None = None) -> str:
        """Create and open a workflow holding a copy of a template's graph.

        Node and edge IDs are regenerated so that no two workflows share them.
        """
        with self._track("create workflow from template", loading=True):
            template = templates.get_template(template_id)
            graph = templates.clone_graph(template.graph)
            return await self._create(name or template.name, template.description, graph)

    async def load_workflow(self, workflow_id: str) -> Workflow:
        """Fetch a workflow and make it the open one."""
        with self._track("load workflow", loading=True):
            workflow = await self._gateway.fetch_by_id(workflow_id)
            if workflow is None:
                raise NotFound(f"Workflow '{workflow_id}' not found")
            self.current_workflow = workflow
            return workflow

    async def update_workflow_meta(
        self,
        workflow_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> Workflow:
        """Rename or re-describe the open workflow.

        The current in-memory graph is always sent along, so this is also
        how change-batch edits become durable.

        Raises:
            ValidationFailure: if ``workflow_id`` is not the open workflow
        """
        with self._track("update workflow", loading=True):
            workflow = self._require_open()
            if workflow.id != workflow_id:
                raise ValidationFailure(
                    f"Workflow '{workflow_id}' is not the open workflow; load it before updating"
                )
            return await self._write_meta(workflow, name, description)

    async def save_workflow(self) -> Workflow:
        """Persist the open workflow's current graph."""
        with self._track("save workflow", loading=True):
            return await self._write_meta(self._require_open())

    async def _write_meta(
        self, workflow: Workflow, name: str | None = None, description: str | None = None
    ) -> Workflow:
        stored = await self._gateway.update_by_id(
            workflow.id,
            WorkflowUpdate(name=name, description=description, graph=workflow.graph),
        )
        if stored is None:
            raise NotFound(f"Workflow '{workflow.id}' not found")

        updates: dict[str, Any] = {"updated_at": stored.updated_at}
        if name is not None:
            updates["name"] = name
        if description is not None:
            updates["description"] = description
        committed = workflow.model_copy(update=updates)
        self.current_workflow = committed
        self._replace_summary(committed)
        return committed

    async def delete_workflow(self, workflow_id: str) -> None:
        """Delete a workflow; closes it if it is the open one."""
        with self._track("delete workflow", loading=True):
            deleted = await self._gateway.delete_by_id(workflow_id)
            if not deleted:
                raise NotFound(f"Workflow '{workflow_id}' not found")

            self.workflows = [s for s in self.workflows if s.id != workflow_id]
            if self.current_workflow is not None and self.current_workflow.id == workflow_id:
                self.current_workflow = None
            logger.info(f"Deleted workflow {workflow_id}")

    def close(self) -> None:
        """Drop the open workflow."""
        self.current_workflow = None

    # ==================== Nodes ====================

    async def add_node(self, kind: NodeKind | str, position: Position | dict[str, float]) -> Node:
        """Append a node with the default payload for ``kind``."""
        with self._track("add node"):
            workflow = self._require_open()
            graph = workflow.graph
            kind = NodeKind(kind)

            node = Node(
                id=generate_node_id(kind.value, {n.id for n in graph.nodes}),
                kind=kind,
                position=Position(**position) if isinstance(position, dict) else position.model_copy(),
                data=node_registry.default_data(kind),
            )
            await self._persist_graph(
                workflow, NodeGraph(nodes=[*graph.nodes, node], edges=graph.edges)
            )
            return node

    async def update_node(self, node_id: str, data_patch: dict[str, Any]) -> Node:
        """Shallow-merge ``data_patch`` into a node's payload.

        Raises:
            NotFound: if the node is not in the open graph
            ValidationFailure: if the merged payload does not fit the node's kind
        """
        with self._track("update node"):
            workflow = self._require_open()
            graph = workflow.graph
            node = graph.get_node(node_id)
            if node is None:
                raise NotFound(f"Node '{node_id}' not found")

            data = node_registry.merge_data(node.kind, node.data, data_patch)
            updated = node.model_copy(update={"data": data})
            await self._persist_graph(
                workflow,
                NodeGraph(
                    nodes=[updated if n.id == node_id else n for n in graph.nodes],
                    edges=graph.edges,
                ),
            )
            return updated

    async def remove_node(self, node_id: str) -> None:
        """Delete a node together with every edge touching it."""
        with self._track("remove node"):
            workflow = self._require_open()
            graph = workflow.graph
            if graph.get_node(node_id) is None:
                raise NotFound(f"Node '{node_id}' not found")

            await self._persist_graph(
                workflow,
                NodeGraph(
                    nodes=[n for n in graph.nodes if n.id != node_id],
                    edges=[e for e in graph.edges if not e.touches(node_id)],
                ),
            )

    # ==================== Edges ====================

    async def connect(
        self, source_id: str, target_id: str, source_handle: str | None = None
    ) -> Edge:
        """Connect two nodes of the open graph.

        Raises:
            ValidationFailure: if the connection breaks a port rule
        """
        with self._track("connect nodes"):
            workflow = self._require_open()
            graph = workflow.graph
            draft = self._validator.validate(graph, source_id, target_id, source_handle)

            edge = Edge.from_draft(generate_edge_id({e.id for e in graph.edges}), draft)
            await self._persist_graph(
                workflow, NodeGraph(nodes=graph.nodes, edges=[*graph.edges, edge])
            )
            return edge

    async def remove_edge(self, edge_id: str) -> None:
        with self._track("remove edge"):
            workflow = self._require_open()
            graph = workflow.graph
            if graph.get_edge(edge_id) is None:
                raise NotFound(f"Edge '{edge_id}' not found")

            await self._persist_graph(
                workflow,
                NodeGraph(nodes=graph.nodes, edges=[e for e in graph.edges if e.id != edge_id]),
            )

    # ==================== Change batches ====================

    def apply_node_changes(self, changes: Iterable[dict[str, Any] | BaseModel]) -> list[Node]:
        """Fold a node change batch into canonical state (not persisted).

        Nodes removed by the batch take their edges with them.
        """
        with self._track("apply node changes", clear_error=False):
            workflow = self.current_workflow
            if workflow is None:
                return []
            graph = workflow.graph

            try:
                nodes = change_applier.apply_node_changes(changes, graph.nodes)
            except ValidationError as e:
                raise ValidationFailure(f"Invalid node change: {e}") from e

            remaining = {n.id for n in nodes}
            edges = [
                e
                for e in graph.edges
                if e.source_node_id in remaining and e.target_node_id in remaining
            ]
            self.current_workflow = workflow.model_copy(
                update={"graph": NodeGraph(nodes=nodes, edges=edges)}
            )
            return nodes

    def apply_edge_changes(self, changes: Iterable[dict[str, Any] | BaseModel]) -> list[Edge]:
        """Fold an edge change batch into canonical state (not persisted)."""
        with self._track("apply edge changes", clear_error=False):
            workflow = self.current_workflow
            if workflow is None:
                return []
            graph = workflow.graph

            try:
                edges = change_applier.apply_edge_changes(changes, graph.edges)
            except ValidationError as e:
                raise ValidationFailure(f"Invalid edge change: {e}") from e

            self.current_workflow = workflow.model_copy(
                update={"graph": NodeGraph(nodes=graph.nodes, edges=edges)}
            )
            return edges

"""Persistence gateways for workflow records.

The graph store talks to storage only through the ``WorkflowGateway``
contract: list, insert, fetch, update and delete whole workflow records.
Updates always carry the complete graph next to any metadata change.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Protocol

import aiosqlite
from pydantic import ValidationError

from flowbuilder.db.database import get_db
from flowbuilder.models.workflow import (
    NodeGraph,
    Workflow,
    WorkflowRecordCreate,
    WorkflowUpdate,
)
from flowbuilder.services.errors import PersistenceFailure

logger = logging.getLogger(__name__)


def _generate_id() -> str:
    """Generate a unique ID."""
    return str(uuid.uuid4())


def _now() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


class WorkflowGateway(Protocol):
    """Storage contract consumed by the graph store."""

    async def list_all(self) -> list[Workflow]:
        """All workflows, newest (by creation) first."""
        ...

    async def insert(self, record: WorkflowRecordCreate) -> Workflow:
        """Store a new workflow, assigning its id and timestamps."""
        ...

    async def fetch_by_id(self, workflow_id: str) -> Workflow | None: ...

    async def update_by_id(self, workflow_id: str, fields: WorkflowUpdate) -> Workflow | None: ...

    async def delete_by_id(self, workflow_id: str) -> bool: ...


def _row_to_workflow(row: aiosqlite.Row) -> Workflow:
    """Convert a database row to a Workflow model.

    Raises:
        PersistenceFailure: if the stored graph cannot be decoded (not retriable)
    """
    graph_json = row["graph_json"]
    try:
        graph = NodeGraph.model_validate(json.loads(graph_json)) if graph_json else NodeGraph.empty()
    except (json.JSONDecodeError, ValidationError) as e:
        raise PersistenceFailure(f"Corrupt workflow record {row['id']}: {e}", retriable=False) from e
    return Workflow(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        graph=graph,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLiteWorkflowGateway:
    """Workflow storage on the shared aiosqlite connection."""

    async def list_all(self) -> list[Workflow]:
        try:
            db = await get_db()
            cursor = await db.execute(
                """
                SELECT id, name, description, graph_json, created_at, updated_at
                FROM workflows ORDER BY created_at DESC, rowid DESC
                """
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceFailure(f"Failed to list workflows: {e}") from e
        return [_row_to_workflow(row) for row in rows]

    async def insert(self, record: WorkflowRecordCreate) -> Workflow:
        workflow_id = _generate_id()
        now = _now()
        try:
            db = await get_db()
            await db.execute(
                """
                INSERT INTO workflows (id, name, description, graph_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    workflow_id,
                    record.name,
                    record.description,
                    json.dumps(record.graph.to_storage()),
                    now,
                    now,
                ),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceFailure(f"Failed to create workflow: {e}") from e

        return Workflow(
            id=workflow_id,
            name=record.name,
            description=record.description,
            graph=record.graph,
            created_at=now,
            updated_at=now,
        )

    async def fetch_by_id(self, workflow_id: str) -> Workflow | None:
        try:
            db = await get_db()
            cursor = await db.execute(
                """
                SELECT id, name, description, graph_json, created_at, updated_at
                FROM workflows WHERE id = ?
                """,
                (workflow_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceFailure(f"Failed to load workflow {workflow_id}: {e}") from e

        if row is None:
            return None
        return _row_to_workflow(row)

    async def update_by_id(self, workflow_id: str, fields: WorkflowUpdate) -> Workflow | None:
        assignments = ["graph_json = ?", "updated_at = ?"]
        params: list[str] = [json.dumps(fields.graph.to_storage()), _now()]
        if fields.name is not None:
            assignments.append("name = ?")
            params.append(fields.name)
        if fields.description is not None:
            assignments.append("description = ?")
            params.append(fields.description)

        try:
            db = await get_db()
            cursor = await db.execute(
                f"UPDATE workflows SET {', '.join(assignments)} WHERE id = ?",
                (*params, workflow_id),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceFailure(f"Failed to update workflow {workflow_id}: {e}") from e

        if cursor.rowcount == 0:
            return None
        return await self.fetch_by_id(workflow_id)

    async def delete_by_id(self, workflow_id: str) -> bool:
        try:
            db = await get_db()
            cursor = await db.execute("DELETE FROM workflows WHERE id = ?", (workflow_id,))
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceFailure(f"Failed to delete workflow {workflow_id}: {e}") from e
        return cursor.rowcount > 0


class InMemoryWorkflowGateway:
    """Workflow storage in a dict, for tests and embedding.

    Records are kept as JSON text so reads go through the same
    serialization as the SQLite gateway.
    """

    def __init__(self) -> None:
        self._records: dict[str, str] = {}
        self._order: list[str] = []

    async def list_all(self) -> list[Workflow]:
        workflows = [Workflow.model_validate_json(self._records[i]) for i in reversed(self._order)]
        return sorted(workflows, key=lambda w: w.created_at, reverse=True)

    async def insert(self, record: WorkflowRecordCreate) -> Workflow:
        now = _now()
        workflow = Workflow(
            id=_generate_id(),
            name=record.name,
            description=record.description,
            graph=record.graph,
            created_at=now,
            updated_at=now,
        )
        self._records[workflow.id] = workflow.model_dump_json(by_alias=True)
        self._order.append(workflow.id)
        return Workflow.model_validate_json(self._records[workflow.id])

    async def fetch_by_id(self, workflow_id: str) -> Workflow | None:
        raw = self._records.get(workflow_id)
        if raw is None:
            return None
        return Workflow.model_validate_json(raw)

    async def update_by_id(self, workflow_id: str, fields: WorkflowUpdate) -> Workflow | None:
        current = await self.fetch_by_id(workflow_id)
        if current is None:
            return None
        updates: dict = {"graph": fields.graph, "updated_at": _now()}
        if fields.name is not None:
            updates["name"] = fields.name
        if fields.description is not None:
            updates["description"] = fields.description
        self._records[workflow_id] = current.model_copy(update=updates).model_dump_json(by_alias=True)
        return Workflow.model_validate_json(self._records[workflow_id])

    async def delete_by_id(self, workflow_id: str) -> bool:
        if workflow_id not in self._records:
            return False
        del self._records[workflow_id]
        self._order.remove(workflow_id)
        return True

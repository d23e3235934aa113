"""Pytest configuration and fixtures."""

import asyncio
import os
import tempfile
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from flowbuilder.db.database import close_database, init_database
from flowbuilder.db.workflow_gateway import InMemoryWorkflowGateway, SQLiteWorkflowGateway
from flowbuilder.main import app
from flowbuilder.models import Workflow, WorkflowRecordCreate, WorkflowUpdate
from flowbuilder.services.errors import PersistenceFailure
from flowbuilder.services.graph_store import GraphStore
from flowbuilder.services.session import StaticSessionProvider


class FlakyGateway(InMemoryWorkflowGateway):
    """In-memory gateway that can be told to fail, and yields on every call.

    Yielding before each write lets concurrently started mutations interleave
    the way they would against a remote store.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.fail_reads = False
        self.update_calls = 0

    async def list_all(self) -> list[Workflow]:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise PersistenceFailure("read timed out")
        return await super().list_all()

    async def fetch_by_id(self, workflow_id: str) -> Workflow | None:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise PersistenceFailure("read timed out")
        return await super().fetch_by_id(workflow_id)

    async def insert(self, record: WorkflowRecordCreate) -> Workflow:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise PersistenceFailure("connection reset by peer")
        return await super().insert(record)

    async def update_by_id(self, workflow_id: str, fields: WorkflowUpdate) -> Workflow | None:
        self.update_calls += 1
        await asyncio.sleep(0)
        if self.fail_writes:
            raise PersistenceFailure("connection reset by peer")
        return await super().update_by_id(workflow_id, fields)

    async def delete_by_id(self, workflow_id: str) -> bool:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise PersistenceFailure("connection reset by peer")
        return await super().delete_by_id(workflow_id)


@pytest.fixture
def gateway() -> FlakyGateway:
    return FlakyGateway()


@pytest.fixture
def session() -> StaticSessionProvider:
    return StaticSessionProvider("user-1")


@pytest.fixture
def store(gateway: FlakyGateway, session: StaticSessionProvider) -> GraphStore:
    return GraphStore(gateway, session=session)


@pytest.fixture
async def open_store(store: GraphStore) -> GraphStore:
    """A store with a freshly created, open workflow."""
    await store.create_workflow("T")
    return store


@pytest.fixture
async def test_db() -> AsyncGenerator[str, None]:
    """Set up a temporary SQLite database."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    await init_database(db_path)

    yield db_path

    await close_database()
    os.unlink(db_path)


@pytest.fixture
async def sqlite_gateway(test_db: str) -> SQLiteWorkflowGateway:
    return SQLiteWorkflowGateway()


@pytest.fixture
async def client(test_db: str) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client backed by a fresh graph store."""
    app.state.graph_store = GraphStore(
        SQLiteWorkflowGateway(), session=StaticSessionProvider("test-user")
    )
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

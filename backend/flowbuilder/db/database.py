"""SQLite connection holder and workflow schema."""

from pathlib import Path

import aiosqlite

SCHEMA_VERSION = 1

# Shared by every SQLiteWorkflowGateway
_db_connection: aiosqlite.Connection | None = None


async def init_database(db_path: str) -> None:
    """Open the workflow database at ``db_path`` and create its schema.

    ``":memory:"`` opens a private in-memory database.
    """
    global _db_connection

    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    _db_connection = await aiosqlite.connect(db_path)
    _db_connection.row_factory = aiosqlite.Row

    if db_path != ":memory:":
        # Readers are not blocked by the single writer
        await _db_connection.execute("PRAGMA journal_mode = WAL")

    await _create_schema(_db_connection)


async def close_database() -> None:
    global _db_connection
    if _db_connection:
        await _db_connection.close()
        _db_connection = None


async def get_db() -> aiosqlite.Connection:
    """Get the open connection."""
    if _db_connection is None:
        raise RuntimeError("Database not initialized. Call init_database first.")
    return _db_connection


async def _create_schema(db: aiosqlite.Connection) -> None:
    # graph_json holds the whole node graph: {"nodes": [...], "edges": [...]}
    await db.execute("""
        CREATE TABLE IF NOT EXISTS workflows (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            graph_json TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """)

    # Listing order is newest first
    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_workflows_created
        ON workflows(created_at DESC)
    """)

    await db.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
    await db.commit()

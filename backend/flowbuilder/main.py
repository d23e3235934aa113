"""FastAPI application entry point."""

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowbuilder.db.database import close_database, init_database
from flowbuilder.db.workflow_gateway import SQLiteWorkflowGateway
from flowbuilder.services.errors import (
    AuthRequired,
    GraphStoreError,
    NotFound,
    PersistenceFailure,
    ValidationFailure,
)
from flowbuilder.services.graph_store import GraphStore
from flowbuilder.services.session import StaticSessionProvider

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[GraphStoreError], int] = {
    AuthRequired: 401,
    NotFound: 404,
    ValidationFailure: 422,
    PersistenceFailure: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    # Startup
    db_path = os.getenv("DATABASE_PATH", "./data/workflow.db")
    await init_database(db_path)

    app.state.graph_store = GraphStore(
        SQLiteWorkflowGateway(),
        session=StaticSessionProvider(os.getenv("FLOWBUILDER_USER")),
    )
    logger.info(f"Graph store ready (database: {db_path})")

    yield

    # Shutdown
    app.state.graph_store.close()
    await close_database()


app = FastAPI(
    title="Workflow Builder",
    description="Assemble automations as graphs of triggers, actions and conditions",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware - allow any localhost port
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^http://localhost(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GraphStoreError)
async def graph_store_error_handler(request: Request, exc: GraphStoreError) -> JSONResponse:
    """Map graph store errors to HTTP status codes."""
    status_code = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)),
        500,
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers after app is created to avoid circular imports
from flowbuilder.api import templates, workflows  # noqa: E402

app.include_router(templates.router, prefix="/api/v1", tags=["templates"])
app.include_router(workflows.router, prefix="/api/v1", tags=["workflows"])

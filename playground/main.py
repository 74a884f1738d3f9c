"""Main FastAPI application."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import files_router, versions_router, project_router, preview_router, frame_router
from .core.config import settings
from .core.logging_config import setup_logging
from .exceptions import PlaygroundException
from .middleware.exception_handler import playground_exception_handler
from .middleware.request_context import RequestContextMiddleware
from .session import EditorSession, get_session

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the playground API."""
    logger.info(f"Environment: {settings.environment.value}")

    # Render the restored project once so the frame has something to show.
    # Runs in the background: the render waits for a frame that may never open.
    session = app.dependency_overrides.get(get_session, get_session)()
    initial_render = asyncio.create_task(session.pipeline.refresh())

    yield  # App runs here

    initial_render.cancel()
    session.frame.detach()


# Create FastAPI app
app = FastAPI(
    title="Code Playground API",
    description=(
        "Backend for a multi-file code playground. Stores project files with "
        "per-file snapshot history, composes them into a single HTML document "
        "and serves it to a sandboxed preview frame."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware stack, outermost first: CORS wraps request context.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)
app.add_middleware(RequestContextMiddleware)

# Register exception handlers
app.add_exception_handler(PlaygroundException, playground_exception_handler)

logger.info(
    "Playground API started | env=%s | storage=%s | render_timeout=%ss",
    settings.environment.value,
    settings.storage_backend.value,
    settings.render_timeout_seconds,
)

# Include routers
app.include_router(files_router)
app.include_router(versions_router)
app.include_router(project_router)
app.include_router(preview_router)
app.include_router(frame_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Code Playground API",
        "version": "1.0.0",
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
async def health_check(session: EditorSession = Depends(get_session)):
    """Health check returning storage status, uptime, and file count.

    Never raises — reports degraded status when the project is not being
    persisted, since editing still works in memory.
    """
    storage_ok = session.storage.is_available() and session.store.last_persistence_error is None
    return {
        "status": "healthy" if storage_ok else "degraded",
        "storage": "ok" if storage_ok else "error",
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": "1.0.0",
        "file_count": len(session.store.list_files()),
    }

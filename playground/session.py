"""Editor session wiring and the FastAPI dependency that exposes it.

One process serves one local editing session: a single store, frame,
renderer and pipeline built lazily from settings. Tests replace the
whole bundle through ``app.dependency_overrides[get_session]``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .core.config import Settings, StorageBackend, settings
from .exceptions import PersistenceUnavailableError
from .repositories import DatabaseStorage, InMemoryStorage, KeyValueStorage, ProjectRepository
from .services import PreviewPipeline, ProjectStore, SandboxFrame, SandboxRenderer

logger = logging.getLogger(__name__)


@dataclass
class EditorSession:
    storage: KeyValueStorage
    store: ProjectStore
    frame: SandboxFrame
    renderer: SandboxRenderer
    pipeline: PreviewPipeline


def build_storage(config: Settings) -> KeyValueStorage:
    """Create the configured storage backend.

    An unusable database still yields a ``DatabaseStorage``; reads and
    writes then fail per call and the store runs memory-only.
    """
    if config.storage_backend == StorageBackend.MEMORY:
        return InMemoryStorage()

    from .database import engine

    storage = DatabaseStorage(engine)
    try:
        storage.ensure_schema()
    except PersistenceUnavailableError as e:
        logger.warning("Storage schema unavailable, project will not be saved", extra={"details": e.details})
    return storage


def build_session(config: Settings, storage: Optional[KeyValueStorage] = None) -> EditorSession:
    storage = storage if storage is not None else build_storage(config)
    repository = ProjectRepository(storage, default_theme=config.default_editor_theme)
    store = ProjectStore(repository)
    frame = SandboxFrame()
    renderer = SandboxRenderer(frame, timeout=config.render_timeout_seconds)
    return EditorSession(
        storage=storage,
        store=store,
        frame=frame,
        renderer=renderer,
        pipeline=PreviewPipeline(store, renderer),
    )


_session: Optional[EditorSession] = None


def get_session() -> EditorSession:
    """Dependency for FastAPI routes to get the editing session."""
    global _session
    if _session is None:
        _session = build_session(settings)
    return _session

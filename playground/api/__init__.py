"""API routes."""

from .files import router as files_router
from .versions import router as versions_router
from .project import router as project_router
from .preview import router as preview_router, frame_router

__all__ = [
    "files_router",
    "versions_router",
    "project_router",
    "preview_router",
    "frame_router",
]

"""Pydantic schemas for project state and API validation."""

from .version import (
    FileVersion,
    VersionCreate,
    VersionTagUpdate,
    VersionRestoreResponse
)
from .file import (
    Language,
    ProjectFile,
    FileCreate,
    FileContentUpdate,
    FileSummaryResponse,
    FileCreatedResponse,
    language_for_name
)
from .project import (
    ProjectState,
    ActiveFileUpdate,
    ThemeUpdate,
    ProjectResponse
)

__all__ = [
    "FileVersion",
    "VersionCreate",
    "VersionTagUpdate",
    "VersionRestoreResponse",
    "Language",
    "ProjectFile",
    "FileCreate",
    "FileContentUpdate",
    "FileSummaryResponse",
    "FileCreatedResponse",
    "language_for_name",
    "ProjectState",
    "ActiveFileUpdate",
    "ThemeUpdate",
    "ProjectResponse",
]

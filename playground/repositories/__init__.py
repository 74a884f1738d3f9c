"""Data access repositories."""

from .storage import KeyValueStorage, InMemoryStorage, DatabaseStorage
from .project_repository import ProjectRepository

__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "DatabaseStorage",
    "ProjectRepository",
]

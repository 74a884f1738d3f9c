"""Shared test fixtures for the playground test suite.

Store and repository tests run against ``InMemoryStorage`` with a fake
clock and sequential ids, so every assertion is deterministic. API tests
get a fresh editor session per test through a dependency override.
"""

import os

# Keep tests in memory and fast before any app imports.
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_FORMAT"] = "text"
os.environ["RENDER_TIMEOUT_SECONDS"] = "0.05"

from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

import pytest
from fastapi.testclient import TestClient

from playground.core.config import settings
from playground.exceptions import PersistenceUnavailableError
from playground.main import app
from playground.repositories import InMemoryStorage, ProjectRepository
from playground.schemas import FileVersion, Language, ProjectFile
from playground.services import ProjectStore
from playground.session import build_session, get_session


class FakeClock:
    """Clock that advances one second per call unless told otherwise."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


class SequentialIds:
    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count}"


class FlakyStorage(InMemoryStorage):
    """In-memory storage whose reads or writes can be switched off."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise PersistenceUnavailableError("read failed")
        return super().get(key)

    def set_many(self, entries: Mapping[str, Optional[str]]) -> None:
        if self.fail_writes:
            raise PersistenceUnavailableError("write failed")
        super().set_many(entries)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def storage() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture()
def repository(storage) -> ProjectRepository:
    return ProjectRepository(storage, default_theme="vs-dark")


@pytest.fixture()
def store(repository, clock, ids) -> ProjectStore:
    """Store seeded with the starter project."""
    return ProjectStore(repository, clock=clock, id_factory=ids)


@pytest.fixture()
def empty_store(store) -> ProjectStore:
    """Store with every starter file deleted."""
    for file in store.list_files():
        store.delete_file(file.id)
    return store


@pytest.fixture()
def session():
    """Fresh editor session on in-memory storage."""
    return build_session(settings, storage=InMemoryStorage())


@pytest.fixture()
def client(session):
    """FastAPI TestClient with the session dependency overridden."""
    app.dependency_overrides[get_session] = lambda: session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_file(
    name: str,
    content: str,
    file_id: Optional[str] = None,
    language: Optional[Language] = None,
) -> ProjectFile:
    """Factory for standalone project files (composition tests)."""
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    file_id = file_id or f"f-{name}"
    return ProjectFile(
        id=file_id,
        name=name,
        language=language or Language.HTML,
        content=content,
        versions=[FileVersion(id=f"{file_id}-v1", timestamp=stamp, content=content, tag="initial")],
    )

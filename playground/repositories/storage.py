"""Durable key-value storage backends.

The project store never talks to a database directly: it is handed a
``KeyValueStorage`` and only ever reads single keys or writes a batch of
keys atomically. ``InMemoryStorage`` is the fake used by tests and by the
``memory`` backend; ``DatabaseStorage`` persists to a SQLAlchemy table.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..database import Base, make_session_factory
from ..exceptions import PersistenceUnavailableError
from ..models import StorageEntry

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Minimal host storage interface."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent.

        Raises:
            PersistenceUnavailableError: the backend could not be read.
        """

    @abstractmethod
    def set_many(self, entries: Mapping[str, Optional[str]]) -> None:
        """Write all entries in one all-or-nothing step. ``None`` deletes a key.

        Raises:
            PersistenceUnavailableError: nothing was written.
        """

    def is_available(self) -> bool:
        return True


class InMemoryStorage(KeyValueStorage):
    """Process-local storage. Values survive only as long as the instance."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_many(self, entries: Mapping[str, Optional[str]]) -> None:
        staged = dict(self.data)
        for key, value in entries.items():
            if value is None:
                staged.pop(key, None)
            else:
                staged[key] = value
        self.data = staged


class DatabaseStorage(KeyValueStorage):
    """Key-value storage on the ``storage_entries`` table."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = make_session_factory(engine)

    def ensure_schema(self) -> None:
        """Create the storage table if it does not exist yet."""
        try:
            Base.metadata.create_all(bind=self.engine, tables=[StorageEntry.__table__])
        except SQLAlchemyError as e:
            raise PersistenceUnavailableError("Could not create storage schema", e) from e

    def get(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            entry = db.get(StorageEntry, key)
            return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            raise PersistenceUnavailableError(f"Could not read storage key {key!r}", e) from e
        finally:
            db.close()

    def set_many(self, entries: Mapping[str, Optional[str]]) -> None:
        db = self.session_factory()
        try:
            for key, value in entries.items():
                if value is None:
                    db.query(StorageEntry).filter(StorageEntry.key == key).delete()
                else:
                    db.merge(StorageEntry(key=key, value=value))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceUnavailableError("Could not write project to storage", e) from e
        finally:
            db.close()

    def is_available(self) -> bool:
        """Cheap connectivity probe used by the health endpoint."""
        try:
            with self.engine.connect():
                return True
        except SQLAlchemyError:
            logger.warning("Storage database is unreachable", exc_info=True)
            return False

"""Project repository: (de)serialization of the whole project.

The project lives under three well-known storage keys. Every save rewrites
all of them in one atomic batch. A load yields a valid ``ProjectState``,
or ``None`` when the record is absent or corrupt; an unreadable backend
raises instead, since the record behind it may still be intact.
"""

import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from ..schemas import ProjectFile, ProjectState
from .storage import KeyValueStorage

FILES_KEY = "editor-files"
ACTIVE_FILE_KEY = "active-file-id"
THEME_KEY = "editor-theme"

_FILES_ADAPTER = TypeAdapter(List[ProjectFile])

logger = logging.getLogger(__name__)


class ProjectRepository:
    """Reads and writes the project snapshot through a ``KeyValueStorage``."""

    def __init__(self, storage: KeyValueStorage, default_theme: str = "vs-dark"):
        self.storage = storage
        self.default_theme = default_theme

    def load(self) -> Optional[ProjectState]:
        """Load the persisted project, or None if it is absent or corrupt.

        A missing active id selects the first file; a dangling one is
        repaired by ``ProjectState`` validation.

        Raises:
            PersistenceUnavailableError: storage could not be read. A saved
                project may still exist, so callers must not overwrite it.
        """
        raw_files = self.storage.get(FILES_KEY)
        active_file_id = self.storage.get(ACTIVE_FILE_KEY)
        theme = self.storage.get(THEME_KEY)

        if raw_files is None:
            logger.debug("No persisted project under %r", FILES_KEY)
            return None

        try:
            files = _FILES_ADAPTER.validate_json(raw_files)
            if not active_file_id and files:
                active_file_id = files[0].id
            state = ProjectState(
                files=files,
                active_file_id=active_file_id or None,
                editor_theme=theme or self.default_theme,
            )
        except ValidationError as e:
            logger.warning(
                "Persisted project is corrupt, treating as absent",
                extra={"error_count": e.error_count(), "first_error": e.errors()[0]["msg"]},
            )
            return None

        logger.info("Loaded persisted project", extra={"file_count": len(state.files)})
        return state

    def save(self, state: ProjectState) -> None:
        """Persist the whole project.

        Raises:
            PersistenceUnavailableError: storage rejected the write.
        """
        self.storage.set_many({
            FILES_KEY: _FILES_ADAPTER.dump_json(state.files).decode("utf-8"),
            ACTIVE_FILE_KEY: state.active_file_id,
            THEME_KEY: state.editor_theme,
        })

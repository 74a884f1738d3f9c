"""Project store — deep module owning the editing session's state.

Owns the file set, the active-file pointer and the editor theme, and
delegates history operations to ``VersionStore``. Every mutating call
validates first, mutates second and persists the whole project before
returning, so callers never observe a half-applied change. Readers only
ever get copies.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from ..core.starter import INITIAL_TAG, build_starter_project
from ..exceptions import InvalidNameError, PersistenceUnavailableError, ProjectFileNotFoundError
from ..repositories import ProjectRepository
from ..schemas import FileVersion, Language, ProjectFile, ProjectState, language_for_name
from ..schemas.file import extension_of
from .version_store import VersionStore

# 12 hex chars = 48 bits, plenty for a single local project.
ID_LENGTH = 12

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:ID_LENGTH]


class ProjectStore:
    """Transactional, persisted store of project files and their histories."""

    def __init__(
        self,
        repository: ProjectRepository,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.repository = repository
        self.clock = clock or _utcnow
        self.id_factory = id_factory or _new_id
        self.versions = VersionStore(self.clock, self.id_factory)
        self.last_persistence_error: Optional[PersistenceUnavailableError] = None
        # Set when the saved project could not be read: it may still exist,
        # so this session never writes over it.
        self.memory_only = False

        try:
            state = repository.load()
        except PersistenceUnavailableError as e:
            self.memory_only = True
            self.last_persistence_error = e
            logger.warning(
                "Saved project unreadable, editing in memory only",
                extra={"error": e.message, "details": e.details},
            )
            self._state = build_starter_project(self.clock, self.id_factory, repository.default_theme)
            return

        if state is None:
            self._state = build_starter_project(self.clock, self.id_factory, repository.default_theme)
            self._persist()
        else:
            self._state = state

    # ------------------------------------------------------------------
    # Queries (all return copies)
    # ------------------------------------------------------------------

    @property
    def active_file_id(self) -> Optional[str]:
        return self._state.active_file_id

    @property
    def active_file(self) -> Optional[ProjectFile]:
        if self._state.active_file_id is None:
            return None
        file = self._find(self._state.active_file_id)
        return file.model_copy(deep=True) if file else None

    @property
    def editor_theme(self) -> str:
        return self._state.editor_theme

    def list_files(self) -> List[ProjectFile]:
        """All files in insertion order."""
        return [f.model_copy(deep=True) for f in self._state.files]

    def get_file(self, file_id: str) -> ProjectFile:
        return self._require(file_id).model_copy(deep=True)

    def get_versions(self, file_id: str) -> List[FileVersion]:
        """A file's history, oldest first."""
        return list(self._require(file_id).versions)

    def state(self) -> ProjectState:
        return self._state.model_copy(deep=True)

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    def add_file(
        self,
        name: str,
        language: Optional[Union[Language, str]] = None,
        content: str = "",
    ) -> str:
        """Add a file with an ``initial`` version and make it active.

        The language is inferred from the extension when omitted.

        Raises:
            InvalidNameError: name is malformed or already taken.
        """
        resolved = self._validate_new_name(name, language)

        file_id = self._unique_file_id()
        file = ProjectFile(
            id=file_id,
            name=name,
            language=resolved,
            content=content,
            versions=[
                FileVersion(id=self.id_factory(), timestamp=self.clock(), content=content, tag=INITIAL_TAG)
            ],
        )
        self._state.files.append(file)
        self._state.active_file_id = file_id
        self._persist()

        logger.info("File added", extra={"file_id": file_id, "file_name": name, "language": resolved.value})
        return file_id

    def update_file(self, file_id: str, content: str) -> None:
        """Replace a file's content. Unknown ids are ignored."""
        file = self._find(file_id)
        if file is None:
            logger.debug("Ignoring update for unknown file", extra={"file_id": file_id})
            return
        file.content = content
        self._persist()

    def delete_file(self, file_id: str) -> bool:
        """Remove a file, re-pointing the active selection if needed.

        Returns True if a file was removed. Unknown ids are a no-op.
        """
        file = self._find(file_id)
        if file is None:
            logger.debug("Ignoring delete for unknown file", extra={"file_id": file_id})
            return False

        self._state.files.remove(file)
        if self._state.active_file_id == file_id:
            remaining = self._state.files
            self._state.active_file_id = remaining[0].id if remaining else None
        self._persist()

        logger.info(
            "File deleted",
            extra={"file_id": file_id, "file_name": file.name, "active_file_id": self._state.active_file_id},
        )
        return True

    def set_active_file(self, file_id: Optional[str]) -> None:
        """Point the active selection at a file, or clear it with None.

        Raises:
            ProjectFileNotFoundError: file_id does not exist.
        """
        if file_id is not None:
            self._require(file_id)
        self._state.active_file_id = file_id
        self._persist()

    def set_editor_theme(self, theme: str) -> None:
        self._state.editor_theme = theme
        self._persist()

    # ------------------------------------------------------------------
    # Version operations (delegated to VersionStore)
    # ------------------------------------------------------------------

    def snapshot(self, file_id: str, tag: Optional[str] = None) -> FileVersion:
        """Capture the file's current content as a new version."""
        file = self._require(file_id)
        version = self.versions.snapshot(file, tag)
        self._persist()
        return version

    def restore(self, file_id: str, version_id: str) -> str:
        """Replace the file's content with a stored version and return it."""
        file = self._require(file_id)
        content = self.versions.restore(file, version_id)
        self._persist()
        return content

    def tag(self, file_id: str, version_id: str, label: str) -> FileVersion:
        """Set or overwrite a version's tag."""
        file = self._require(file_id)
        version = self.versions.tag(file, version_id, label)
        self._persist()
        return version

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find(self, file_id: str) -> Optional[ProjectFile]:
        for file in self._state.files:
            if file.id == file_id:
                return file
        return None

    def _require(self, file_id: str) -> ProjectFile:
        file = self._find(file_id)
        if file is None:
            raise ProjectFileNotFoundError(file_id)
        return file

    def _unique_file_id(self) -> str:
        existing = {f.id for f in self._state.files}
        file_id = self.id_factory()
        while file_id in existing:
            file_id = self.id_factory()
        return file_id

    def _validate_new_name(self, name: str, language: Optional[Union[Language, str]]) -> Language:
        if not isinstance(name, str) or not name:
            raise InvalidNameError(str(name), "name is empty")
        if name != name.strip():
            raise InvalidNameError(name, "name has leading or trailing whitespace")
        if "/" in name or "\\" in name:
            raise InvalidNameError(name, "name must not contain path separators")
        if not extension_of(name):
            raise InvalidNameError(name, "name must include an extension")
        if any(f.name == name for f in self._state.files):
            raise InvalidNameError(name, "a file with this name already exists")

        if language is not None:
            try:
                return Language(language)
            except ValueError:
                raise InvalidNameError(name, f"unknown language {language!r}")
        inferred = language_for_name(name)
        if inferred is None:
            raise InvalidNameError(name, "unknown extension; a language must be given")
        return inferred

    def _persist(self) -> None:
        """Write the whole project; failures leave the change in memory only."""
        if self.memory_only:
            logger.debug("Skipping save, saved project was unreadable at startup")
            return
        try:
            self.repository.save(self._state)
        except PersistenceUnavailableError as e:
            self.last_persistence_error = e
            logger.warning(
                "Project not persisted, continuing in memory",
                extra={"error": e.message, "details": e.details},
            )
        else:
            self.last_persistence_error = None

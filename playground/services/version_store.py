"""Version store — linear snapshot history of a single file.

Operates on one ``ProjectFile`` at a time and knows nothing about the
project, the active selection or persistence; ``ProjectStore`` resolves
the file and persists afterwards.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from ..exceptions import VersionNotFoundError
from ..schemas import FileVersion, ProjectFile

logger = logging.getLogger(__name__)


class VersionStore:
    """Snapshot, restore and tag operations on a file's version list."""

    def __init__(self, clock: Callable[[], datetime], id_factory: Callable[[], str]):
        self.clock = clock
        self.id_factory = id_factory

    def get(self, file: ProjectFile, version_id: str) -> FileVersion:
        """Find a version in the file's history. Raises VersionNotFoundError."""
        return file.versions[self._index_of(file, version_id)]

    def snapshot(self, file: ProjectFile, tag: Optional[str] = None) -> FileVersion:
        """Append an immutable capture of the file's current content."""
        timestamp = self.clock()
        last = file.versions[-1] if file.versions else None
        if last is not None and timestamp < last.timestamp:
            timestamp = last.timestamp

        version_id = self.id_factory()
        existing = {v.id for v in file.versions}
        while version_id in existing:
            version_id = self.id_factory()

        version = FileVersion(id=version_id, timestamp=timestamp, content=file.content, tag=tag)
        file.versions.append(version)
        logger.debug(
            "Snapshot taken",
            extra={"file_id": file.id, "version_id": version.id, "version_count": len(file.versions)},
        )
        return version

    def restore(self, file: ProjectFile, version_id: str) -> str:
        """Replace the file's content with a version's content.

        No new version is created: edits since the last snapshot are
        discarded. Returns the restored content.
        """
        version = self.get(file, version_id)
        file.content = version.content
        logger.debug("Version restored", extra={"file_id": file.id, "version_id": version_id})
        return file.content

    def tag(self, file: ProjectFile, version_id: str, label: str) -> FileVersion:
        """Overwrite a version's tag (last write wins)."""
        index = self._index_of(file, version_id)
        tagged = file.versions[index].model_copy(update={"tag": label})
        file.versions[index] = tagged
        return tagged

    @staticmethod
    def _index_of(file: ProjectFile, version_id: str) -> int:
        for index, version in enumerate(file.versions):
            if version.id == version_id:
                return index
        raise VersionNotFoundError(file.id, version_id)

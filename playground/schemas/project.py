"""Project schemas."""

from pydantic import BaseModel, model_validator
from typing import Optional, List

from .file import ProjectFile, FileSummaryResponse


class ProjectState(BaseModel):
    """Full persisted project: files with embedded histories plus selection.

    Validation rejects duplicate names or ids (treated as corruption on load)
    and repairs a dangling active file id instead of rejecting it.
    """
    files: List[ProjectFile] = []
    active_file_id: Optional[str] = None
    editor_theme: str = "vs-dark"

    @model_validator(mode="after")
    def check_integrity(self) -> "ProjectState":
        names = [f.name for f in self.files]
        if len(names) != len(set(names)):
            raise ValueError("duplicate file names in project")
        ids = [f.id for f in self.files]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate file ids in project")
        if self.active_file_id is not None and self.active_file_id not in ids:
            self.active_file_id = ids[0] if ids else None
        return self


class ActiveFileUpdate(BaseModel):
    """Schema for changing the active file (None clears the selection)."""
    file_id: Optional[str] = None


class ThemeUpdate(BaseModel):
    """Schema for changing the editor theme."""
    theme: str


class ProjectResponse(BaseModel):
    """Project overview for collaborators."""
    files: List[FileSummaryResponse]
    active_file_id: Optional[str]
    editor_theme: str

"""Version schemas."""

from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime, timezone
from typing import Optional


class FileVersion(BaseModel):
    """Immutable snapshot of a file's content.

    Frozen: the tag operation swaps in a copy instead of mutating in place.
    Numeric timestamps (epoch milliseconds) are accepted on load.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    content: str
    tag: Optional[str] = None

    @field_validator('timestamp')
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so versions stay comparable."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class VersionCreate(BaseModel):
    """Schema for taking a snapshot."""
    tag: Optional[str] = None


class VersionTagUpdate(BaseModel):
    """Schema for tagging a version."""
    tag: str


class VersionRestoreResponse(BaseModel):
    """Schema for restore response."""
    file_id: str
    version_id: str
    content: str

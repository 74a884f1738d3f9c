"""Preview schemas."""

from pydantic import BaseModel
from typing import Optional, List


class CompositionNoticeResponse(BaseModel):
    code: str
    message: str


class ComposedDocumentResponse(BaseModel):
    """Composed document plus any fallbacks the engine had to use."""
    html: str
    root_file_id: Optional[str]
    degraded: bool
    notices: List[CompositionNoticeResponse]


class RenderStatusResponse(BaseModel):
    """Snapshot of the sandbox renderer."""
    render_id: int
    status: Optional[str]
    last_failure: Optional[str]
    frame_attached: bool


class RenderFailureReport(BaseModel):
    """Load failure reported by the sandboxed frame."""
    reason: str

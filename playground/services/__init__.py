"""Business logic services."""

from .project_store import ProjectStore
from .version_store import VersionStore
from .composition import ComposedDocument, CompositionNotice, compose
from .sandbox import RenderResult, RenderStatus, SandboxFrame, SandboxRenderer
from .preview_pipeline import PreviewPipeline

__all__ = [
    "ProjectStore",
    "VersionStore",
    "ComposedDocument",
    "CompositionNotice",
    "compose",
    "RenderResult",
    "RenderStatus",
    "SandboxFrame",
    "SandboxRenderer",
    "PreviewPipeline",
]

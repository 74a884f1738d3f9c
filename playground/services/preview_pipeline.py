"""Preview pipeline: store -> composition -> sandbox."""

import logging
from typing import Optional

from .composition import ComposedDocument, compose
from .project_store import ProjectStore
from .sandbox import RenderResult, SandboxRenderer

logger = logging.getLogger(__name__)


class PreviewPipeline:
    """Re-renders the preview after edits and content-changing restores."""

    def __init__(self, store: ProjectStore, renderer: SandboxRenderer):
        self.store = store
        self.renderer = renderer
        self.last_document: Optional[ComposedDocument] = None

    def compose(self) -> ComposedDocument:
        return compose(self.store.list_files())

    async def refresh(self) -> RenderResult:
        document = self.compose()
        self.last_document = document
        return await self.renderer.render(document.html)

    async def after_edit(self) -> RenderResult:
        return await self.refresh()

    async def after_restore(self, file_id: str, previous_content: str, new_content: str) -> Optional[RenderResult]:
        """Re-render only if the restore changed the active file's content."""
        if file_id != self.store.active_file_id or previous_content == new_content:
            logger.debug("Restore did not change the active file, preview kept", extra={"file_id": file_id})
            return None
        return await self.refresh()

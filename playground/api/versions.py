"""Version API endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends
from typing import List

from ..schemas import FileVersion, VersionCreate, VersionRestoreResponse, VersionTagUpdate
from ..session import EditorSession, get_session

router = APIRouter(prefix="/api/files/{file_id}/versions", tags=["versions"])


@router.get("", response_model=List[FileVersion])
async def list_versions(file_id: str, session: EditorSession = Depends(get_session)):
    """List a file's versions, oldest first."""
    return session.store.get_versions(file_id)


@router.post("", response_model=FileVersion, status_code=201)
async def create_version(
    file_id: str,
    payload: VersionCreate,
    session: EditorSession = Depends(get_session),
):
    """Snapshot the file's current content."""
    return session.store.snapshot(file_id, payload.tag)


@router.post("/{version_id}/restore", response_model=VersionRestoreResponse)
async def restore_version(
    file_id: str,
    version_id: str,
    background_tasks: BackgroundTasks,
    session: EditorSession = Depends(get_session),
):
    """Replace the file's content with a stored version."""
    previous = session.store.get_file(file_id).content
    content = session.store.restore(file_id, version_id)
    background_tasks.add_task(session.pipeline.after_restore, file_id, previous, content)
    return VersionRestoreResponse(file_id=file_id, version_id=version_id, content=content)


@router.put("/{version_id}/tag", response_model=FileVersion)
async def tag_version(
    file_id: str,
    version_id: str,
    payload: VersionTagUpdate,
    session: EditorSession = Depends(get_session),
):
    """Set or overwrite a version's tag."""
    return session.store.tag(file_id, version_id, payload.tag)

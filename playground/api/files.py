"""File API endpoints.

Endpoints are thin — ProjectStore owns validation, the active-file
invariant and persistence. Anything that changes the file set schedules
a preview render after the response is sent.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from typing import List

from ..schemas import FileContentUpdate, FileCreate, FileCreatedResponse, FileSummaryResponse, ProjectFile
from ..session import EditorSession, get_session

router = APIRouter(prefix="/api/files", tags=["files"])


@router.get("", response_model=List[FileSummaryResponse])
async def list_files(session: EditorSession = Depends(get_session)):
    """List files in project order."""
    return [FileSummaryResponse.from_file(f) for f in session.store.list_files()]


@router.post("", response_model=FileCreatedResponse, status_code=201)
async def add_file(
    payload: FileCreate,
    background_tasks: BackgroundTasks,
    session: EditorSession = Depends(get_session),
):
    """Add a file and make it active."""
    file_id = session.store.add_file(payload.name, payload.language, payload.content)
    background_tasks.add_task(session.pipeline.after_edit)
    return FileCreatedResponse(id=file_id)


@router.get("/{file_id}", response_model=ProjectFile)
async def get_file(file_id: str, session: EditorSession = Depends(get_session)):
    """Get a file with its full version history."""
    return session.store.get_file(file_id)


@router.put("/{file_id}", status_code=204)
async def update_file(
    file_id: str,
    payload: FileContentUpdate,
    background_tasks: BackgroundTasks,
    session: EditorSession = Depends(get_session),
):
    """Replace a file's content. Unknown ids are accepted and ignored."""
    session.store.update_file(file_id, payload.content)
    background_tasks.add_task(session.pipeline.after_edit)
    return Response(status_code=204)


@router.delete("/{file_id}", status_code=204)
async def delete_file(
    file_id: str,
    background_tasks: BackgroundTasks,
    session: EditorSession = Depends(get_session),
):
    """Delete a file (idempotent)."""
    if session.store.delete_file(file_id):
        background_tasks.add_task(session.pipeline.after_edit)
    return Response(status_code=204)

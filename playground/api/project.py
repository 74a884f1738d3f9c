"""Project-level API endpoints: overview, active file and theme."""

from fastapi import APIRouter, Depends

from ..schemas import ActiveFileUpdate, FileSummaryResponse, ProjectResponse, ThemeUpdate
from ..session import EditorSession, get_session

router = APIRouter(prefix="/api/project", tags=["project"])


def _project_response(session: EditorSession) -> ProjectResponse:
    store = session.store
    return ProjectResponse(
        files=[FileSummaryResponse.from_file(f) for f in store.list_files()],
        active_file_id=store.active_file_id,
        editor_theme=store.editor_theme,
    )


@router.get("", response_model=ProjectResponse)
async def get_project(session: EditorSession = Depends(get_session)):
    return _project_response(session)


@router.put("/active", response_model=ProjectResponse)
async def set_active_file(payload: ActiveFileUpdate, session: EditorSession = Depends(get_session)):
    """Select the active file, or clear the selection with null."""
    session.store.set_active_file(payload.file_id)
    return _project_response(session)


@router.put("/theme", response_model=ProjectResponse)
async def set_theme(payload: ThemeUpdate, session: EditorSession = Depends(get_session)):
    session.store.set_editor_theme(payload.theme)
    return _project_response(session)

"""Preview API endpoints.

``/api/preview/*`` is the host-side surface: the composed document, the
renderer status and the host frame's load signals. ``/preview/frame`` is
the only URL the sandboxed frame loads, served with an isolating CSP.
"""

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import HTMLResponse

from ..schemas.preview import (
    ComposedDocumentResponse,
    CompositionNoticeResponse,
    RenderFailureReport,
    RenderStatusResponse,
)
from ..services.composition import FALLBACK_ROOT
from ..session import EditorSession, get_session

router = APIRouter(prefix="/api/preview", tags=["preview"])
frame_router = APIRouter(prefix="/preview", tags=["preview"])


@router.get("/document", response_model=ComposedDocumentResponse)
async def get_composed_document(session: EditorSession = Depends(get_session)):
    """Compose the current files without rendering them."""
    document = session.pipeline.compose()
    return ComposedDocumentResponse(
        html=document.html,
        root_file_id=document.root_file_id,
        degraded=document.degraded,
        notices=[CompositionNoticeResponse(code=n.code, message=n.message) for n in document.notices],
    )


@router.get("/status", response_model=RenderStatusResponse)
async def get_render_status(session: EditorSession = Depends(get_session)):
    render_id, status, last_failure = session.renderer.status()
    return RenderStatusResponse(
        render_id=render_id,
        status=status.value if status else None,
        last_failure=last_failure,
        frame_attached=session.frame.attached,
    )


@router.post("/render", status_code=202)
async def request_render(background_tasks: BackgroundTasks, session: EditorSession = Depends(get_session)):
    """Schedule a render of the current files (e.g. when the preview first opens)."""
    background_tasks.add_task(session.pipeline.refresh)
    return {"scheduled": True}


@router.post("/frame/{render_id}/loaded")
async def frame_loaded(render_id: int, session: EditorSession = Depends(get_session)):
    """Host frame's load event. Stale ids are accepted and ignored."""
    return {"accepted": session.renderer.notify_loaded(render_id)}


@router.post("/frame/{render_id}/failed")
async def frame_failed(
    render_id: int,
    payload: RenderFailureReport,
    session: EditorSession = Depends(get_session),
):
    """Host frame's error event. Stale ids are accepted and ignored."""
    return {"accepted": session.renderer.notify_failed(render_id, payload.reason)}


@frame_router.get("/frame", response_class=HTMLResponse)
async def serve_frame(session: EditorSession = Depends(get_session)):
    """Serve the loading or last committed document under the sandbox CSP."""
    frame = session.frame
    return HTMLResponse(content=frame.served_document or FALLBACK_ROOT, headers=frame.headers())

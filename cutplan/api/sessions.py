# Session endpoints (create, fetch, delete, export)
import logging
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response

from cutplan.core import EditSession, ExportBlocked
from cutplan.core.config import settings
from cutplan.export import generate_xml
from cutplan.schemas import CreateSessionRequest, EditPlan, ExportPayload
from cutplan.session_registry import SessionRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> EditSession:
    """Look up a session or fail with 404."""
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


@router.post("", response_model=EditPlan)
def create_session(request: CreateSessionRequest, registry: SessionRegistry = Depends(get_registry)):
    """Start a review session from an analysis result and return the default plan."""
    registry.cleanup_old_sessions(settings.session_max_age)

    session = EditSession(
        raw_segments=request.segments,
        original_duration=request.duration,
        detections=request.detections,
        filter_state=request.filters,
    )
    registry.add(session)
    plan = session.plan()
    logger.info(
        f"Created session {session.session_id}: {len(plan.clusters)} clusters, "
        f"{len(plan.primary)} removals, {len(plan.pendingReview)} pending review"
    )
    return plan


@router.get("/{session_id}", response_model=EditPlan)
def get_plan(session: EditSession = Depends(get_session)):
    """Current removal plan, recomputed from the session's selections."""
    return session.plan()


@router.delete("/{session_id}")
def delete_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    if not registry.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"deleted": session_id}


@router.get("/{session_id}/export", response_model=ExportPayload)
def export_plan(session: EditSession = Depends(get_session)):
    """Final cut list. 409 if the plan failed its integrity check."""
    try:
        return session.export_payload()
    except ExportBlocked as e:
        logger.warning(f"Export refused for session {session.session_id}: {e}")
        raise HTTPException(status_code=409, detail={"warnings": e.warnings})


@router.get("/{session_id}/export/xml")
def export_xml(session: EditSession = Depends(get_session)):
    """Keep list as FCP XML."""
    try:
        payload = session.export_payload()
    except ExportBlocked as e:
        logger.warning(f"XML export refused for session {session.session_id}: {e}")
        raise HTTPException(status_code=409, detail={"warnings": e.warnings})

    xml = generate_xml(payload.keepSegments, framerate=settings.export_framerate)
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Content-Disposition": f'attachment; filename="{session.session_id}.xml"'},
    )

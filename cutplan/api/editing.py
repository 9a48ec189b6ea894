# Editing endpoints (cluster winners, member toggles, category filters)
import logging
from fastapi import APIRouter, HTTPException, Depends

from cutplan.core import EditSession
from cutplan.schemas import EditPlan, FilterUpdateRequest, ToggleSegmentRequest, WinnerRequest
from .sessions import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions/{session_id}", tags=["editing"])


@router.post("/clusters/{cluster_id}/winner", response_model=EditPlan)
def select_winner(cluster_id: str, request: WinnerRequest, session: EditSession = Depends(get_session)):
    """Keep one member of a cluster (or none, with 'gap') and remove the rest."""
    try:
        session.tracker.select_winner(cluster_id, request.selectedWinner)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Cluster not found: {cluster_id}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.plan()


@router.post("/clusters/{cluster_id}/toggle", response_model=EditPlan)
def toggle_segment(cluster_id: str, request: ToggleSegmentRequest, session: EditSession = Depends(get_session)):
    """Flip a single cluster member between removed and kept."""
    try:
        session.tracker.toggle_segment(cluster_id, request.segmentId)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Cluster not found: {cluster_id}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.plan()


@router.put("/filters", response_model=EditPlan)
def update_filters(request: FilterUpdateRequest, session: EditSession = Depends(get_session)):
    """Apply a partial category filter update."""
    tracker = session.tracker
    if request.enabled:
        for category, enabled in request.enabled.items():
            tracker.set_category_enabled(category, enabled)
    if request.minConfidence is not None:
        tracker.set_min_confidence(request.minConfidence)
    if request.showOnlyHighSeverity is not None:
        tracker.set_high_severity_only(request.showOnlyHighSeverity)

    logger.info(f"Session {session.session_id}: filters updated")
    return session.plan()

from fastapi import APIRouter, Depends
import logging

from cutplan.core.config import settings
from cutplan.session_registry import SessionRegistry, get_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
def read_root():
    """Health check endpoint."""
    return {"message": settings.app_title}


@router.get("/status")
def get_status(registry: SessionRegistry = Depends(get_registry)):
    """Number of live review sessions."""
    return {"status": "ok", "sessions": len(registry.session_ids())}

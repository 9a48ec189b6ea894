# API package - route handlers
from .sessions import router as sessions_router
from .editing import router as editing_router
from .system import router as system_router

__all__ = ['sessions_router', 'editing_router', 'system_router']

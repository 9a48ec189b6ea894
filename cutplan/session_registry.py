"""
In-memory registry of review sessions.
Sessions live for the lifetime of the process; saving and loading them is
the host application's job.
"""
import time
import threading
import logging
from typing import Dict, List, Optional

from cutplan.core.session import EditSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Thread-safe registry of active edit sessions."""

    def __init__(self):
        self._sessions: Dict[str, EditSession] = {}
        self._lock = threading.Lock()

    def add(self, session: EditSession) -> EditSession:
        """Register a session, replacing any session with the same ID."""
        with self._lock:
            self._sessions[session.session_id] = session
            logger.info(f"Registered session {session.session_id}")
            return session

    def get(self, session_id: str) -> Optional[EditSession]:
        """Get a session by ID."""
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        with self._lock:
            if session_id in self._sessions:
                del self._sessions[session_id]
                return True
            return False

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def cleanup_old_sessions(self, max_age_seconds: int) -> int:
        """Remove sessions created more than max_age ago."""
        now = time.time()
        with self._lock:
            to_delete = [
                session_id for session_id, session in self._sessions.items()
                if now - session.created_at > max_age_seconds
            ]
            for session_id in to_delete:
                del self._sessions[session_id]
                logger.info(f"Cleaned up old session: {session_id}")
            return len(to_delete)


# Global session registry
_registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    """FastAPI dependency returning the process-wide registry."""
    return _registry

import time

import pytest

from cutplan.core.session import EditSession
from cutplan.session_registry import SessionRegistry

SEGMENTS = [{"id": "um", "category": "filler-words", "startTime": 1, "endTime": 2}]


def make_session(session_id, age=0.0):
    session = EditSession(SEGMENTS, 10, session_id=session_id)
    session.created_at = time.time() - age
    return session


def test_add_get_delete():
    registry = SessionRegistry()
    registry.add(make_session("a"))

    assert registry.get("a").session_id == "a"
    assert registry.session_ids() == ["a"]
    assert registry.delete("a")
    assert not registry.delete("a")
    assert registry.get("a") is None


def test_cleanup_removes_only_expired_sessions():
    registry = SessionRegistry()
    registry.add(make_session("old", age=7200))
    registry.add(make_session("fresh", age=10))

    assert registry.cleanup_old_sessions(3600) == 1
    assert registry.session_ids() == ["fresh"]
    assert registry.cleanup_old_sessions(3600) == 0


if __name__ == "__main__":
    pytest.main([__file__])

import pytest

from conftest import T0
from interview import lifecycle
from interview.state import InterviewState, Session
from services.sessions import SessionManager
from services.store import InterviewStore


def _store(session_id):
    return InterviewStore(InterviewState(phase="active", session=Session(id=session_id, start_time=T0)))


def test_add_and_get_live_store():
    manager = SessionManager()
    store = _store("a")
    assert manager.add(store) == "a"
    assert manager.get("a") is store
    with pytest.raises(KeyError):
        manager.get("missing")


def test_add_requires_a_session():
    with pytest.raises(ValueError):
        SessionManager().add(InterviewStore(lifecycle.initial_state()))


def test_retire_keeps_only_recent_finished_stores():
    manager = SessionManager(retain_finished=2)
    for session_id in ("a", "b", "c"):
        manager.add(_store(session_id))
        manager.retire(session_id)
    assert manager.ids() == []
    assert manager.finished_ids() == ["b", "c"]
    assert manager.get("c").session_id == "c"
    with pytest.raises(KeyError):
        manager.get("a")


def test_retire_with_zero_retention_drops_store():
    manager = SessionManager(retain_finished=0)
    manager.add(_store("a"))
    manager.retire("a")
    assert manager.ids() == [] and manager.finished_ids() == []
    manager.retire("unknown")


def test_remove_clears_live_and_finished():
    manager = SessionManager()
    manager.add(_store("a"))
    manager.add(_store("b"))
    manager.retire("b")
    manager.remove("a")
    manager.remove("b")
    assert manager.ids() == [] and manager.finished_ids() == []

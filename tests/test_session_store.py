import pytest

from app.schemas.assets import Language
from app.services.errors import SessionNotFound, TooManySessions
from app.services.session import SessionState, SessionStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _store(ttl=60.0, max_sessions=3):
    clock = FakeClock()
    store = SessionStore(1024, Language.en, ttl_seconds=ttl, max_sessions=max_sessions, clock=clock)
    return store, clock


def test_idle_sessions_expire():
    store, clock = _store(ttl=60.0)
    old = store.create()
    clock.now += 30
    fresh = store.create()

    clock.now += 45
    with pytest.raises(SessionNotFound):
        store.get(old.id)
    assert store.get(fresh.id) is fresh
    assert len(store) == 1


def test_get_refreshes_idle_timer():
    store, clock = _store(ttl=60.0)
    session = store.create()
    for _ in range(5):
        clock.now += 50
        assert store.get(session.id) is session


def test_busy_sessions_are_not_expired():
    store, clock = _store(ttl=60.0)
    session = store.create()
    session.state = SessionState.rendering

    clock.now += 600
    store.prune()
    assert store.get(session.id) is session


def test_full_store_evicts_least_recently_used_idle_session():
    store, clock = _store(max_sessions=2)
    first = store.create()
    clock.now += 1
    second = store.create()
    clock.now += 1
    store.get(first.id)

    clock.now += 1
    third = store.create()

    assert len(store) == 2
    with pytest.raises(SessionNotFound):
        store.get(second.id)
    assert store.get(first.id) is first
    assert store.get(third.id) is third


def test_full_store_of_busy_sessions_refuses_new_ones():
    store, _ = _store(max_sessions=2)
    for session in (store.create(), store.create()):
        session.state = SessionState.analyzing

    with pytest.raises(TooManySessions):
        store.create()


def test_delete_unknown_session():
    store, _ = _store()
    with pytest.raises(SessionNotFound):
        store.delete("nope")

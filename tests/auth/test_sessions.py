import threading

import pytest

from portal_backend.auth.sessions import SessionManager, SessionSnapshot


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _snapshot(user_id: int = 1, role: str = 'user', name: str = 'Ann') -> SessionSnapshot:
    return SessionSnapshot(id=user_id, public_id=f'pub{user_id}', name=name, email=f'u{user_id}@example.com', role=role)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(clock: FakeClock) -> SessionManager:
    return SessionManager(idle_timeout_seconds=60, clock=clock)


def test_create_and_get_session_returns_snapshot(manager: SessionManager) -> None:
    token = manager.create_session(_snapshot())

    assert manager.get_session(token) == _snapshot()


def test_tokens_are_unique_and_opaque(manager: SessionManager) -> None:
    first = manager.create_session(_snapshot())
    second = manager.create_session(_snapshot())

    assert first != second
    assert 'pub1' not in first
    assert len(first) >= 32


def test_get_session_returns_none_for_unknown_or_blank_token(manager: SessionManager) -> None:
    assert manager.get_session('missing') is None
    assert manager.get_session(None) is None
    assert manager.get_session('') is None


def test_session_expires_after_idle_timeout(manager: SessionManager, clock: FakeClock) -> None:
    token = manager.create_session(_snapshot())

    clock.advance(61)

    assert manager.get_session(token) is None
    assert len(manager) == 0


def test_lookup_refreshes_idle_timer(manager: SessionManager, clock: FakeClock) -> None:
    token = manager.create_session(_snapshot())

    clock.advance(50)
    assert manager.get_session(token) is not None
    clock.advance(50)

    assert manager.get_session(token) is not None


def test_destroy_session_is_idempotent(manager: SessionManager) -> None:
    token = manager.create_session(_snapshot())

    manager.destroy_session(token)
    manager.destroy_session(token)

    assert manager.get_session(token) is None


def test_destroy_user_sessions_only_removes_that_user(manager: SessionManager) -> None:
    first = manager.create_session(_snapshot(1))
    second = manager.create_session(_snapshot(1))
    other = manager.create_session(_snapshot(2))

    assert manager.destroy_user_sessions(1) == 2

    assert manager.get_session(first) is None
    assert manager.get_session(second) is None
    assert manager.get_session(other) is not None


def test_update_user_sessions_replaces_snapshot(manager: SessionManager) -> None:
    token = manager.create_session(_snapshot(1, role='user'))

    manager.update_user_sessions(_snapshot(1, role='admin', name='Ann B'))

    refreshed = manager.get_session(token)
    assert refreshed.role == 'admin'
    assert refreshed.name == 'Ann B'
    assert refreshed.is_admin


def test_revoking_user_drops_sessions_on_success(manager: SessionManager) -> None:
    token = manager.create_session(_snapshot(1))

    with manager.revoking_user(1):
        pass

    assert manager.get_session(token) is None


def test_revoking_user_keeps_sessions_when_block_fails(manager: SessionManager) -> None:
    token = manager.create_session(_snapshot(1))

    with pytest.raises(RuntimeError):
        with manager.revoking_user(1):
            raise RuntimeError('store down')

    assert manager.get_session(token) is not None


def test_revoking_user_blocks_concurrent_lookups(manager: SessionManager) -> None:
    token = manager.create_session(_snapshot(1))
    seen = []
    entered = threading.Event()

    def lookup() -> None:
        entered.set()
        seen.append(manager.get_session(token))

    with manager.revoking_user(1):
        worker = threading.Thread(target=lookup)
        worker.start()
        entered.wait(timeout=1)
        worker.join(timeout=0.1)
        assert worker.is_alive()

    worker.join(timeout=1)
    assert seen == [None]


def test_create_session_if_skips_when_check_fails(manager: SessionManager) -> None:
    assert manager.create_session_if(_snapshot(1), lambda: False) is None
    assert len(manager) == 0

    token = manager.create_session_if(_snapshot(1), lambda: True)

    assert manager.get_session(token) == _snapshot(1)


def test_create_session_if_runs_check_under_table_lock(manager: SessionManager) -> None:
    other_thread_could_lock = []

    def check() -> bool:
        other = threading.Thread(
            target=lambda: other_thread_could_lock.append(manager._lock.acquire(blocking=False))
        )
        other.start()
        other.join()
        return True

    manager.create_session_if(_snapshot(1), check)

    assert other_thread_could_lock == [False]


def test_purge_expired_removes_only_stale_entries(manager: SessionManager, clock: FakeClock) -> None:
    stale = manager.create_session(_snapshot(1))
    clock.advance(40)
    fresh = manager.create_session(_snapshot(2))
    clock.advance(30)

    assert manager.purge_expired() == 1
    assert manager.get_session(stale) is None
    assert manager.get_session(fresh) is not None


def test_concurrent_creates_do_not_lose_entries(manager: SessionManager) -> None:
    tokens: list[str] = []
    lock = threading.Lock()

    def worker(user_id: int) -> None:
        for _ in range(50):
            token = manager.create_session(_snapshot(user_id))
            with lock:
                tokens.append(token)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(manager) == 400
    assert all(manager.get_session(token) is not None for token in tokens)


def test_public_view_hides_internal_id() -> None:
    view = _snapshot(7).public_view()

    assert view == {'id': 'pub7', 'name': 'Ann', 'email': 'u7@example.com', 'role': 'user'}

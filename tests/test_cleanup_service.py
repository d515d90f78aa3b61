"""
Tests for the background expiry sweeper.
"""

import time
from datetime import timedelta

import pytest
from conftest import make_entry

from mimir.exceptions import CacheBackendError
from mimir.repositories import InMemoryCacheRepository
from mimir.services import CleanupService


def wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def cache(clock):
    """Create a cache holding one already expired entry."""
    repo = InMemoryCacheRepository(max_size=10, clock=clock)
    repo.set(make_entry([1.0, 0.0, 0.0], ttl=timedelta(seconds=1)))
    clock.advance(seconds=2)
    return repo


def test_not_started_by_default(cache):
    sweeper = CleanupService(cache, interval=0.01)
    assert sweeper.running is False
    time.sleep(0.05)
    assert cache.size() == 1


def test_run_once(cache):
    sweeper = CleanupService(cache, interval=60)
    assert sweeper.run_once() == 1
    assert sweeper.run_once() == 0


def test_start_sweeps_and_stop_joins(cache):
    sweeper = CleanupService(cache, interval=0.01)
    sweeper.start()
    try:
        assert sweeper.running
        assert wait_for(lambda: cache.size() == 0)
    finally:
        sweeper.stop(timeout=2)
    assert sweeper.running is False


def test_start_is_idempotent(cache):
    sweeper = CleanupService(cache, interval=0.01)
    sweeper.start()
    thread = sweeper._thread
    sweeper.start()
    assert sweeper._thread is thread
    sweeper.stop(timeout=2)


def test_stop_without_start_is_noop(cache):
    CleanupService(cache, interval=1).stop()


def test_context_manager(cache):
    with CleanupService(cache, interval=0.01) as sweeper:
        assert sweeper.running
    assert sweeper.running is False


def test_can_restart_after_stop(cache, clock):
    sweeper = CleanupService(cache, interval=0.01)
    sweeper.start()
    sweeper.stop(timeout=2)

    cache.set(make_entry([0.0, 1.0, 0.0], created_at=clock.now, ttl=timedelta(seconds=1)))
    clock.advance(seconds=2)
    sweeper.start()
    try:
        assert wait_for(lambda: cache.size() == 0)
    finally:
        sweeper.stop(timeout=2)


def test_backend_errors_do_not_kill_the_loop():
    class FlakyStore:
        def __init__(self):
            self.calls = 0

        def cleanup(self):
            self.calls += 1
            if self.calls == 1:
                raise CacheBackendError("backend unavailable")
            return 0

    store = FlakyStore()
    with CleanupService(store, interval=0.01) as sweeper:
        assert wait_for(lambda: store.calls >= 3)
        assert sweeper.running


def test_rejects_non_positive_interval(cache):
    with pytest.raises(ValueError):
        CleanupService(cache, interval=0)


def test_late_stop_signal_does_not_reach_a_restarted_thread(cache, clock):
    sweeper = CleanupService(cache, interval=0.01)
    sweeper.start()
    first_event = sweeper._stop_event
    sweeper.stop(timeout=2)

    sweeper.start()
    second = sweeper._thread
    try:
        # A stop() racing with start() would set the previous thread's event late
        first_event.set()
        time.sleep(0.05)
        assert second.is_alive()

        cache.set(make_entry([0.0, 1.0, 0.0], created_at=clock.now, ttl=timedelta(seconds=1)))
        clock.advance(seconds=2)
        assert wait_for(lambda: cache.size() == 0)
    finally:
        sweeper.stop(timeout=2)
    assert not second.is_alive()

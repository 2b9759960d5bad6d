from __future__ import annotations

import threading
from datetime import UTC, datetime

import pytest

from windy_client.errors import FailureKind, QuotaExceeded, WindyClientError
from windy_client.quota import QuotaTracker


class _FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


def test_accepts_exactly_max_requests_then_rejects() -> None:
    clock = _FakeClock()
    tracker = QuotaTracker(3, window_seconds=60.0, now=clock)

    for _ in range(3):
        tracker.check_limit()

    with pytest.raises(WindyClientError) as excinfo:
        tracker.check_limit()

    failure = excinfo.value.failure
    assert excinfo.value.kind is FailureKind.QUOTA_EXCEEDED
    assert isinstance(failure, QuotaExceeded)
    assert failure.remaining == 0
    assert failure.resets_at == datetime.fromtimestamp(clock.value + 60.0, tz=UTC)
    assert tracker.get_remaining_quota().remaining == 0


def test_rejected_call_does_not_consume_quota() -> None:
    clock = _FakeClock()
    tracker = QuotaTracker(1, window_seconds=60.0, now=clock)
    tracker.check_limit()

    for _ in range(5):
        with pytest.raises(WindyClientError):
            tracker.check_limit()

    clock.advance(60.0)
    assert tracker.get_remaining_quota().remaining == 1


def test_window_reset_after_elapsed_window() -> None:
    clock = _FakeClock()
    tracker = QuotaTracker(2, window_seconds=100.0, now=clock)
    tracker.check_limit()
    tracker.check_limit()

    clock.advance(99.0)
    with pytest.raises(WindyClientError):
        tracker.check_limit()

    clock.advance(1.0)  # reaches window end exactly
    tracker.check_limit()

    status = tracker.get_remaining_quota()
    assert status.remaining == 1
    assert status.resets_at == datetime.fromtimestamp(clock.value + 100.0, tz=UTC)


def test_remaining_quota_is_read_only() -> None:
    tracker = QuotaTracker(5, now=_FakeClock())

    for _ in range(3):
        assert tracker.get_remaining_quota().remaining == 5

    tracker.check_limit()
    assert tracker.get_remaining_quota().remaining == 4


def test_idle_tracker_resets_lazily_on_query() -> None:
    clock = _FakeClock()
    tracker = QuotaTracker(1, window_seconds=10.0, now=clock)
    tracker.check_limit()

    clock.advance(1_000.0)
    status = tracker.get_remaining_quota()

    assert status.remaining == 1
    assert status.resets_at == datetime.fromtimestamp(clock.value + 10.0, tz=UTC)


def test_default_window_is_one_day() -> None:
    clock = _FakeClock()
    tracker = QuotaTracker(10, now=clock)

    status = tracker.get_remaining_quota()
    assert status.resets_at == datetime.fromtimestamp(clock.value + 86_400.0, tz=UTC)


def test_concurrent_checks_never_exceed_maximum() -> None:
    tracker = QuotaTracker(50, window_seconds=3_600.0)
    accepted: list[int] = []
    rejected: list[int] = []
    lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        for _ in range(20):
            try:
                tracker.check_limit()
            except WindyClientError:
                with lock:
                    rejected.append(1)
            else:
                with lock:
                    accepted.append(1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(accepted) == 50
    assert len(rejected) == 8 * 20 - 50


def test_rejects_invalid_configuration() -> None:
    with pytest.raises(ValueError):
        QuotaTracker(-1)
    with pytest.raises(ValueError):
        QuotaTracker(1, window_seconds=0)

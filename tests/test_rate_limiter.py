"""Unit tests for the in-memory sliding-window rate limiter."""

import threading
import time

import pytest

from linkshelf.adapters.rate_limit.in_memory import SlidingWindowRateLimiter


def test_allows_up_to_limit_then_denies_burst(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=3, window_seconds=60, clock=fake_clock)

    results = [limiter.try_acquire() for _ in range(10)]

    assert [r.allowed for r in results] == [True] * 3 + [False] * 7
    assert results[2].remaining == 0
    assert all(r.retry_after_seconds is None for r in results[:3])


def test_burst_spread_over_small_span_is_still_bounded(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=4, window_seconds=60, clock=fake_clock)

    allowed = 0
    for _ in range(20):
        if limiter.try_acquire().allowed:
            allowed += 1
        fake_clock.advance(0.25)

    assert allowed == 4


def test_window_recovery_after_oldest_entry_expires(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=60, clock=fake_clock)
    t0 = fake_clock()

    assert limiter.try_acquire().allowed
    assert limiter.try_acquire().allowed
    assert not limiter.try_acquire().allowed

    fake_clock.set(t0 + 60 + 0.001)
    assert limiter.try_acquire().allowed


def test_retry_after_is_ceiling_of_remaining_time(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=fake_clock)

    assert limiter.try_acquire().allowed

    fake_clock.advance(10)
    denied = limiter.try_acquire()

    assert denied.allowed is False
    assert denied.retry_after_seconds == 50


def test_boundary_scenario_five_per_minute(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=5, window_seconds=60, clock=fake_clock)
    t0 = fake_clock()

    for offset in (0.0, 1.0, 2.0, 3.0, 4.0):
        fake_clock.set(t0 + offset)
        assert limiter.try_acquire().allowed

    fake_clock.set(t0 + 4.5)
    sixth = limiter.try_acquire()
    assert sixth.allowed is False
    assert sixth.retry_after_seconds == 56

    fake_clock.set(t0 + 60.001)
    assert limiter.try_acquire().allowed


def test_entry_aged_exactly_window_is_expired(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=fake_clock)

    assert limiter.try_acquire().allowed

    fake_clock.advance(59.5)
    almost = limiter.try_acquire()
    assert almost.allowed is False
    assert almost.retry_after_seconds == 1

    fake_clock.advance(0.5)
    assert limiter.try_acquire().allowed


def test_retry_after_is_never_below_one(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=1, clock=fake_clock)
    limiter.try_acquire()
    limiter.try_acquire()

    for step in (0.1, 0.3, 0.4, 0.15):
        fake_clock.advance(step)
        result = limiter.try_acquire()
        if not result.allowed:
            assert result.retry_after_seconds is not None
            assert result.retry_after_seconds >= 1


def test_denied_call_does_not_record_attempt(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=fake_clock)
    limiter.try_acquire()

    for _ in range(5):
        fake_clock.advance(1)
        assert not limiter.try_acquire().allowed

    assert limiter.recent_attempts == (1_000.0,)


def test_pruning_is_idempotent_after_window_elapses(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=3, window_seconds=60, clock=fake_clock)
    for _ in range(3):
        limiter.try_acquire()

    fake_clock.advance(120)

    for _ in range(5):
        assert limiter.current_usage() == 0
    assert limiter.recent_attempts == ()

    assert limiter.try_acquire().allowed
    assert limiter.current_usage() == 1


def test_attempts_stay_in_chronological_order(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=5, window_seconds=60, clock=fake_clock)

    for _ in range(3):
        limiter.try_acquire()
        fake_clock.advance(2.5)

    attempts = limiter.recent_attempts
    assert list(attempts) == sorted(attempts)
    assert len(attempts) == 3


def test_reset_at_points_to_oldest_live_entry(fake_clock) -> None:
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=fake_clock)

    allowed = limiter.try_acquire()
    fake_clock.advance(10)
    denied = limiter.try_acquire()

    assert allowed.reset_at == 1_060
    assert denied.reset_at == 1_060
    assert denied.limit == 1
    assert denied.remaining == 0


def test_concurrent_threads_never_over_admit() -> None:
    limiter = SlidingWindowRateLimiter(limit=7, window_seconds=60, clock=lambda: 5_000.0)
    barrier = threading.Barrier(32)
    outcomes: list[bool] = []
    outcomes_lock = threading.Lock()

    def _worker() -> None:
        barrier.wait()
        for _ in range(5):
            result = limiter.try_acquire()
            with outcomes_lock:
                outcomes.append(result.allowed)

    threads = [threading.Thread(target=_worker) for _ in range(32)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count(True) == 7
    assert len(outcomes) == 160


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0, "window_seconds": 60},
        {"limit": 1, "window_seconds": 0},
        {"limit": 1, "window_seconds": -5},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SlidingWindowRateLimiter(**kwargs)


def test_default_clock_uses_wall_time() -> None:
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60)

    assert limiter.try_acquire().allowed
    assert limiter.try_acquire().allowed is False


def test_slow_clock_read_cannot_reorder_attempts() -> None:
    first_read = threading.Event()
    reads = iter(range(100))

    def slow_first_clock() -> float:
        value = float(next(reads))
        if value == 0.0:
            first_read.set()
            time.sleep(0.05)
        return 1_000.0 + value

    limiter = SlidingWindowRateLimiter(limit=5, window_seconds=60, clock=slow_first_clock)

    slow = threading.Thread(target=limiter.try_acquire)
    slow.start()
    first_read.wait(timeout=1)
    fast = threading.Thread(target=limiter.try_acquire)
    fast.start()
    slow.join()
    fast.join()

    attempts = limiter.recent_attempts
    assert attempts == tuple(sorted(attempts))
    assert len(attempts) == 2

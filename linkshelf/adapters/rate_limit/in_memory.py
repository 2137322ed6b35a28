"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: prune, check and append happen under one lock.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from typing import Callable

from linkshelf.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Allow at most ``limit`` attempts within any rolling ``window_seconds``.

    Timestamps of allowed attempts are kept in arrival order, so the oldest
    live attempt is always at the front of the deque. Expired entries are
    pruned lazily on every call; an entry whose age equals the window length
    counts as expired.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limit.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of attempts allowed per window.
            window_seconds: Length of the sliding window in seconds.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = float(window_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._attempts: deque[float] = deque()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def recent_attempts(self) -> tuple[float, ...]:
        """Snapshot of tracked attempt timestamps, oldest first (not pruned)."""
        with self._lock:
            return tuple(self._attempts)

    def _prune_locked(self, now: float) -> None:
        while self._attempts and now - self._attempts[0] >= self._window_seconds:
            self._attempts.popleft()

    def _reset_at_locked(self, now: float) -> int:
        anchor = self._attempts[0] if self._attempts else now
        return int(math.ceil(anchor + self._window_seconds))

    def current_usage(self) -> int:
        """Return the number of attempts still inside the window."""
        with self._lock:
            now = self._clock()
            self._prune_locked(now)
            return len(self._attempts)

    def try_acquire(self) -> RateLimitResult:
        """Allow the attempt and record it, or deny it with a retry hint.

        Returns:
            RateLimitResult. When denied, ``retry_after_seconds`` is the time
            until the oldest live attempt exits the window, rounded up to
            whole seconds and never less than 1.
        """
        with self._lock:
            # Read under the lock so appended timestamps stay in order
            now = self._clock()
            self._prune_locked(now)

            if len(self._attempts) < self._limit:
                self._attempts.append(now)
                return RateLimitResult(
                    allowed=True,
                    limit=self._limit,
                    remaining=self._limit - len(self._attempts),
                    reset_at=self._reset_at_locked(now),
                    retry_after_seconds=None,
                )

            oldest = self._attempts[0]
            wait = self._window_seconds - (now - oldest)
            return RateLimitResult(
                allowed=False,
                limit=self._limit,
                remaining=0,
                reset_at=self._reset_at_locked(now),
                retry_after_seconds=max(1, int(math.ceil(wait))),
            )

"""Rate limiter interfaces.

Services depend on this abstraction (not the concrete implementation) so
the guarded call site never cares how attempts are tracked.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Decision returned for a single acquisition attempt.

    Attributes:
        allowed: Whether the attempt may proceed.
        limit: Max attempts per window.
        remaining: Slots left in the window after this decision.
        reset_at: UNIX epoch seconds when the oldest live attempt leaves the window.
        retry_after_seconds: Whole seconds to wait when denied (>= 1), None when allowed.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None

    @property
    def denied(self) -> bool:
        return not self.allowed


class AbstractRateLimiter(ABC):
    """Interface for limiters guarding a single scarce resource."""

    @abstractmethod
    def try_acquire(self) -> RateLimitResult:
        """Attempt to take one slot from the budget.

        Returns:
            RateLimitResult describing whether the attempt was allowed.
            Denial is a normal result, never an exception.
        """
        raise NotImplementedError

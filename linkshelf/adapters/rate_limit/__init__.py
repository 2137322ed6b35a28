"""Rate limiting adapters.

A small abstraction layer so the summarizer guard depends on an interface
while the process runs a single in-memory sliding-window limiter.
"""

from linkshelf.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from linkshelf.adapters.rate_limit.in_memory import SlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "RateLimitResult",
    "SlidingWindowRateLimiter",
]

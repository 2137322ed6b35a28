"""Summarizer rate limiting wiring.

This module connects the rate limiting adapter to the rest of the app.

Design goals:
- Explicit lifetime: the limiter is built once by the app factory and kept
  on ``app.state``; nothing here holds a module-level instance.
- Single guard: services call ``acquire_or_raise`` immediately before the
  metered LLM call, and nowhere else.
- Denial is a control-flow branch: it surfaces as ``RateLimitedAppError`` so
  the HTTP layer can answer 429 with a Retry-After hint, distinct from
  scraping or LLM failures.
"""

from __future__ import annotations

import logging

from linkshelf.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from linkshelf.adapters.rate_limit.in_memory import SlidingWindowRateLimiter
from linkshelf.core.config import AppSettings
from linkshelf.core.errors import RateLimitedAppError

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Rate limit reached. Please try again later."


def build_summarizer_limiter(app_settings: AppSettings) -> AbstractRateLimiter:
    """Build the process-wide limiter guarding the summarizer.

    Args:
        app_settings: Resolved application settings.

    Returns:
        AbstractRateLimiter: Sliding-window limiter sized from settings.
    """

    return SlidingWindowRateLimiter(
        limit=app_settings.summarizer_rate_limit,
        window_seconds=app_settings.summarizer_rate_window_seconds,
    )


def acquire_or_raise(limiter: AbstractRateLimiter, *, resource: str = "summarizer") -> RateLimitResult:
    """Take one slot from ``limiter`` or raise with a retry hint.

    Args:
        limiter: Limiter guarding the resource about to be called.
        resource: Name of the guarded resource, used in logs.

    Returns:
        RateLimitResult: The allowed decision.

    Raises:
        RateLimitedAppError: When the window is full. ``details.retry_after``
            carries the whole-second wait hint.
    """

    result = limiter.try_acquire()
    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "resource": resource,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return result

    retry_after = result.retry_after_seconds or 1
    logger.warning(
        "rate_limit.denied",
        extra={
            "resource": resource,
            "limit": result.limit,
            "remaining": result.remaining,
            "retry_after_s": retry_after,
        },
    )
    raise RateLimitedAppError(
        code=f"{resource}_rate_limited",
        message=RATE_LIMITED_MESSAGE,
        details={
            "retry_after": retry_after,
            "limit": result.limit,
            "remaining": result.remaining,
            "reset_at": result.reset_at,
        },
    )

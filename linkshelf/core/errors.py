"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    http_status: int
    retry_after: int
    limit: int
    remaining: int
    reset_at: int
    url: str
    upstream_status: int
    model: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class NotFoundAppError(AppError):
    """Raised when a requested bookmark does not exist."""


class ScrapeAppError(AppError):
    """Raised when the submitted page cannot be fetched or read."""


class LLMAppError(AppError):
    """Raised when LLM provider/client operations fail."""


class RateLimitedAppError(AppError):
    """Raised when the summarizer budget is exhausted.

    ``retry_after_seconds`` is always a positive whole number of seconds.
    """

    @property
    def retry_after_seconds(self) -> int:
        return int((self.details or {}).get("retry_after", 1))

"""API key authentication.

Keys are validated against a comma-separated list from environment
variables (``APP_API_KEYS``). Used via FastAPI ``Depends()`` on every
``/v1`` route; failures surface as ``AuthenticationAppError`` and are
rendered by the global handler as 403.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Header, Request

from linkshelf.core.config import AppSettings, settings, settings_from_state
from linkshelf.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def _key_fingerprint(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Examples:
        >>> sorted(parse_api_keys("key1, key2 ,key3 "))
        ['key1', 'key2', 'key3']
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()
    return {key.strip() for key in keys_string.split(",") if key.strip()}


def validate_api_key(provided_key: str | None, app_settings: AppSettings | None = None) -> None:
    """Validate that the provided API key matches a configured key.

    Pure validation logic without FastAPI dependencies for easy testing.
    ``app_settings`` defaults to the process-wide settings.

    Raises:
        AuthenticationAppError: If the key is missing or invalid, or if
            authentication is required but no keys are configured.
    """
    cfg = app_settings or settings.app
    if not cfg.api_key_required:
        return

    valid_keys = parse_api_keys(cfg.api_keys)
    if not valid_keys:
        logger.error(
            "auth.misconfigured",
            extra={"reason": "api_keys_not_configured"},
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={"hint": "Set APP_API_KEYS or disable auth with APP_API_KEY_REQUIRED=false"},
        )

    if not provided_key:
        logger.warning("auth.missing_key")
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Missing API key. Provide X-API-Key header.",
        )

    if provided_key not in valid_keys:
        logger.warning(
            "auth.invalid_key",
            extra={"api_key_hash": _key_fingerprint(provided_key)},
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_api_key(
    request: Request,
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency for API key authentication.

    Usage:
        @router.post("/protected", dependencies=[Depends(verify_api_key)])
        async def protected_endpoint(): ...
    """
    app_settings = settings_from_state(request.app.state).app
    validate_api_key(x_api_key, app_settings)
    if app_settings.api_key_required:
        logger.debug("auth.success", extra={"api_key_hash": _key_fingerprint(x_api_key or "")})

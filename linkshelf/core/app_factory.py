"""Application factory for the FastAPI app.

Builds every long-lived collaborator exactly once (LLM client, page fetcher,
summary cache, repositories and the summarizer rate limiter), stores them on
``app.state`` and wires middleware, handlers and routers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from fastapi import FastAPI

from linkshelf.adapters.llm.base import AbstractLLMClient
from linkshelf.adapters.llm.factory import create_llm_client
from linkshelf.adapters.rate_limit.base import AbstractRateLimiter
from linkshelf.adapters.scraper.base import AbstractPageFetcher
from linkshelf.adapters.scraper.httpx_fetcher import HttpxPageFetcher
from linkshelf.adapters.storage.base import AbstractBookmarkRepository, AbstractProfileRepository
from linkshelf.adapters.storage.in_memory import InMemoryBookmarkRepository, InMemoryProfileRepository
from linkshelf.api.routes import activity_router, bookmarks_router, health_router, profiles_router
from linkshelf.core.config import Settings, settings as global_settings
from linkshelf.core.exception_handlers import setup_exception_handlers
from linkshelf.core.logging import configure_logging
from linkshelf.core.middleware import request_id_middleware
from linkshelf.core.openapi import apply_openapi_customizations
from linkshelf.core.rate_limit import build_summarizer_limiter
from linkshelf.services.activity_service import ActivityService
from linkshelf.services.bookmark_service import BookmarkService
from linkshelf.services.profile_service import ProfileService
from linkshelf.services.summarizer_service import SummarizerService
from linkshelf.utils.simple_cache import SimpleTTLCache

logger = logging.getLogger(__name__)


@dataclass
class AppComponents:
    """Collaborators that may be swapped out (mainly in tests)."""

    llm: AbstractLLMClient | None = None
    fetcher: AbstractPageFetcher | None = None
    repository: AbstractBookmarkRepository | None = None
    profiles: AbstractProfileRepository | None = None
    limiter: AbstractRateLimiter | None = None
    cache: SimpleTTLCache | None = None


def _build_services(app: FastAPI, cfg: Settings, components: AppComponents) -> None:
    llm = components.llm or create_llm_client(cfg.llm)
    fetcher = components.fetcher or HttpxPageFetcher(
        timeout_seconds=cfg.scraper.timeout_seconds,
        user_agent=cfg.scraper.user_agent,
        max_bytes=cfg.scraper.max_bytes,
    )
    repository = components.repository or InMemoryBookmarkRepository()
    profiles = components.profiles or InMemoryProfileRepository()
    limiter = components.limiter or build_summarizer_limiter(cfg.app)
    cache = components.cache or SimpleTTLCache(
        ttl_seconds=cfg.app.summary_cache_ttl_seconds,
        max_entries=cfg.app.summary_cache_max_entries,
    )

    app.state.summarizer_limiter = limiter
    app.state.llm_client = llm
    app.state.page_fetcher = fetcher
    app.state.bookmark_service = BookmarkService(
        fetcher=fetcher,
        summarizer=SummarizerService(llm),
        limiter=limiter,
        repository=repository,
        cache=cache,
    )
    app.state.activity_service = ActivityService(repository)
    app.state.profile_service = ProfileService(profiles=profiles, bookmarks=repository)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("app.startup")
    try:
        yield
    finally:
        await app.state.page_fetcher.aclose()
        await app.state.llm_client.aclose()
        logger.info("app.shutdown")


def create_app(
    cfg: Settings | None = None,
    components: AppComponents | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        cfg: Settings to build from; defaults to the process-wide settings.
        components: Optional pre-built collaborators overriding the defaults.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    cfg = cfg or global_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    app = FastAPI(
        title="Linkshelf API",
        description=(
            "Bookmarking API: submit a URL, get back a stored bookmark with an "
            "LLM-generated title, summary and topic. Summarizer calls are "
            "rate limited; denied requests receive 429 with Retry-After."
        ),
        version="0.1.0",
        lifespan=_lifespan,
    )

    app.state.settings = cfg
    _build_services(app, cfg, components or AppComponents())

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(bookmarks_router, prefix="/v1")
    app.include_router(activity_router, prefix="/v1")
    app.include_router(profiles_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info(
        "app.configured",
        extra={
            "app_env": cfg.app_env,
            "llm_provider": cfg.llm.provider,
            "llm_model": cfg.llm.model,
            "summarizer_rate_limit": cfg.app.summarizer_rate_limit,
            "summarizer_rate_window_s": cfg.app.summarizer_rate_window_seconds,
        },
    )
    return app

"""Bookmark creation pipeline.

Handles the full flow behind ``POST /v1/bookmarks``:
- URL validation
- Page metadata scraping
- Summary cache lookup
- Rate-limited summarizer call
- Fallbacks to scraped metadata, source detection and persistence
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from urllib.parse import urlsplit

from linkshelf.adapters.rate_limit.base import AbstractRateLimiter
from linkshelf.adapters.scraper.base import AbstractPageFetcher, PageMetadata
from linkshelf.adapters.storage.base import AbstractBookmarkRepository, BookmarkRecord
from linkshelf.core.errors import NotFoundAppError, ValidationAppError
from linkshelf.core.rate_limit import acquire_or_raise
from linkshelf.schemas.bookmark import SummaryResult
from linkshelf.services.summarizer_service import PROMPT_VERSION, SummarizerService
from linkshelf.utils.simple_cache import SimpleTTLCache, build_cache_key
from linkshelf.utils.source import extract_source

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "Uncategorized"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_url(url: str) -> str:
    """Return the trimmed URL if it is an absolute http(s) URL.

    Raises:
        ValidationAppError: If the URL is empty, relative or not http(s).
    """
    candidate = (url or "").strip()
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
    except ValueError:
        hostname = None
        parts = None

    if parts is None or parts.scheme not in ("http", "https") or not hostname:
        raise ValidationAppError(
            code="invalid_url",
            message="URL must be an absolute http(s) address.",
            details={"hint": "Example: https://example.com/article"},
        )
    return candidate


class BookmarkService:
    """Create, list and delete bookmarks.

    The summarizer is metered, so ``limiter`` is consulted immediately
    before every summarizer call and nowhere else. Cache hits skip both.
    """

    def __init__(
        self,
        *,
        fetcher: AbstractPageFetcher,
        summarizer: SummarizerService,
        limiter: AbstractRateLimiter,
        repository: AbstractBookmarkRepository,
        cache: SimpleTTLCache,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.limiter = limiter
        self.repository = repository
        self.cache = cache
        self._now = now

    async def _summarize(self, url: str, page: PageMetadata) -> tuple[SummaryResult, bool]:
        cache_key = build_cache_key(url, page.title, page.description, salt=PROMPT_VERSION)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached, True

        acquire_or_raise(self.limiter, resource="summarizer")
        summary = await self.summarizer.summarize(url, page)
        self.cache.set(cache_key, summary)
        return summary, False

    async def create_bookmark(
        self,
        url: str,
        *,
        user_id: str | None = None,
        user_display_name: str | None = None,
    ) -> tuple[BookmarkRecord, bool]:
        """Scrape, summarize and store a bookmark.

        Args:
            url: URL submitted by the user.
            user_id: Optional owner id.
            user_display_name: Optional owner display name.

        Returns:
            Tuple of (stored bookmark, whether the summary came from cache).

        Raises:
            ValidationAppError: If the URL is not an absolute http(s) URL.
            ScrapeAppError: If the page cannot be fetched.
            RateLimitedAppError: If the summarizer budget is exhausted.
            LLMAppError: If the summarizer call fails.
        """
        url = validate_url(url)
        page = await self.fetcher.fetch_metadata(url)
        summary, cached = await self._summarize(url, page)

        record = self.repository.add(
            BookmarkRecord(
                url=url,
                title=summary.title or page.title or url,
                summary=summary.summary or page.description,
                topic=summary.topic or DEFAULT_TOPIC,
                source=extract_source(url),
                created_at=self._now(),
                user_id=user_id,
                user_display_name=user_display_name,
            )
        )

        logger.info(
            "bookmark.created",
            extra={
                "bookmark_id": record.id,
                "source": record.source,
                "topic": record.topic,
                "summary_cached": cached,
            },
        )
        return record, cached

    def list_bookmarks(self, user_id: str) -> list[BookmarkRecord]:
        """Return the user's bookmarks, newest first."""
        return self.repository.list_by_user(user_id)

    def delete_bookmark(self, user_id: str, url: str) -> int:
        """Delete the user's bookmark(s) for ``url``.

        Raises:
            NotFoundAppError: If the user has no bookmark for that URL.
        """
        removed = self.repository.delete_by_url(user_id, url)
        if not removed:
            raise NotFoundAppError(
                code="bookmark_not_found",
                message="Bookmark not found.",
                details={"url": url},
            )
        logger.info("bookmark.deleted", extra={"removed": removed})
        return removed

"""HTML page metadata fetcher backed by httpx and BeautifulSoup."""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from linkshelf.adapters.scraper.base import AbstractPageFetcher, PageMetadata
from linkshelf.core.errors import ScrapeAppError
from linkshelf.utils.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

MAX_TITLE_CHARS = 300
MAX_DESCRIPTION_CHARS = 1000


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    content = tag.get("content")
    return content if isinstance(content, str) else ""


def extract_metadata(html: str) -> PageMetadata:
    """Extract title and description from an HTML document.

    Title prefers ``<title>`` and falls back to ``og:title``; description
    prefers ``meta[name=description]`` and falls back to ``og:description``.

    Args:
        html: Raw HTML markup.

    Returns:
        PageMetadata with normalized strings (empty when missing).
    """
    soup = BeautifulSoup(html, "lxml")

    title = soup.title.get_text() if soup.title else ""
    if not title.strip():
        title = _meta_content(soup, property="og:title")

    description = _meta_content(soup, name="description")
    if not description.strip():
        description = _meta_content(soup, property="og:description")

    return PageMetadata(
        title=normalize_text(title, MAX_TITLE_CHARS),
        description=normalize_text(description, MAX_DESCRIPTION_CHARS),
    )


class HttpxPageFetcher(AbstractPageFetcher):
    """Fetch pages over HTTP and scrape their metadata.

    The underlying ``httpx.AsyncClient`` is shared across requests and closed
    on application shutdown.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        user_agent: str = "Mozilla/5.0 (compatible; LinkshelfBot/1.0)",
        max_bytes: int = 2_000_000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._max_bytes = max_bytes
        self._client = client or httpx.AsyncClient(
            timeout=timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
        )

    async def fetch_metadata(self, url: str) -> PageMetadata:
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            logger.warning("scrape.timeout", extra={"url": url})
            raise ScrapeAppError(
                code="page_fetch_timeout",
                message="Timed out while fetching the page.",
                details={"url": url},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "scrape.failed",
                extra={"url": url, "error_type": type(exc).__name__},
            )
            raise ScrapeAppError(
                code="page_fetch_failed",
                message="Could not fetch the page.",
                details={"url": url},
            ) from exc

        if response.status_code >= 400:
            logger.warning(
                "scrape.http_error",
                extra={"url": url, "upstream_status": response.status_code},
            )
            raise ScrapeAppError(
                code="page_fetch_http_error",
                message=f"The page responded with HTTP {response.status_code}.",
                details={"url": url, "upstream_status": response.status_code},
            )

        content = response.content[: self._max_bytes]
        try:
            html = content.decode(response.encoding or "utf-8", errors="ignore")
        except LookupError:
            html = content.decode("utf-8", errors="ignore")
        metadata = extract_metadata(html)

        logger.info(
            "scrape.completed",
            extra={
                "url": url,
                "has_title": bool(metadata.title),
                "has_description": bool(metadata.description),
            },
        )
        return metadata

    async def aclose(self) -> None:
        await self._client.aclose()

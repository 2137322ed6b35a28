"""Page metadata fetcher interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PageMetadata:
    """Title and description scraped from a page (empty strings when absent)."""

    title: str = ""
    description: str = ""


class AbstractPageFetcher(ABC):
    """Interface for fetching page metadata from a URL."""

    @abstractmethod
    async def fetch_metadata(self, url: str) -> PageMetadata:
        """Fetch ``url`` and extract its title and description.

        Raises:
            ScrapeAppError: If the page cannot be fetched.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources held by the fetcher."""
        return None

"""Page metadata fetchers used before summarization."""

from linkshelf.adapters.scraper.base import AbstractPageFetcher, PageMetadata
from linkshelf.adapters.scraper.httpx_fetcher import HttpxPageFetcher, extract_metadata

__all__ = [
    "AbstractPageFetcher",
    "HttpxPageFetcher",
    "PageMetadata",
    "extract_metadata",
]

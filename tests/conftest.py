"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any ``linkshelf`` import so the global
settings object is built from them.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o-mini")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402

from linkshelf.adapters.llm.base import AbstractLLMClient  # noqa: E402
from linkshelf.adapters.scraper.base import AbstractPageFetcher, PageMetadata  # noqa: E402
from linkshelf.core.errors import ScrapeAppError  # noqa: E402


class FakeClock:
    """Deterministic clock for limiter tests (UNIX seconds)."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds

    def set(self, value: float) -> None:
        self.current = value


class FakePageFetcher(AbstractPageFetcher):
    """Page fetcher returning canned metadata (or raising)."""

    def __init__(self, metadata: PageMetadata | None = None, error: ScrapeAppError | None = None) -> None:
        self.metadata = metadata or PageMetadata(
            title="Understanding Sliding Windows",
            description="A walkthrough of rolling rate limits.",
        )
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def fetch_metadata(self, url: str) -> PageMetadata:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.metadata

    async def aclose(self) -> None:
        self.closed = True


class FakeLLMClient(AbstractLLMClient):
    """LLM client returning a fixed JSON payload and recording prompts."""

    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response if response is not None else {
            "title": "Sliding Windows Explained",
            "summary": "How rolling windows cap request rates.",
            "topic": "Engineering",
        }
        self.error = error
        self.prompts: list[str] = []

    async def generate_json(self, prompt: str, *, system_prompt=None, schema=None, **kwargs: Any) -> dict[str, Any]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return dict(self.response)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_fetcher() -> FakePageFetcher:
    return FakePageFetcher()


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

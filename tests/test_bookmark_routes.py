"""Tests for the bookmark and activity API routes.

The app is built through ``create_app`` with fake collaborators so no
network calls happen. All /v1 endpoints require the X-API-Key header.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from linkshelf.adapters.rate_limit.in_memory import SlidingWindowRateLimiter
from linkshelf.adapters.scraper.base import PageMetadata
from linkshelf.adapters.storage.base import BookmarkRecord
from linkshelf.adapters.storage.in_memory import InMemoryBookmarkRepository
from linkshelf.core.app_factory import AppComponents, create_app
from linkshelf.core.config import AppSettings, Settings
from linkshelf.core.errors import LLMAppError, ScrapeAppError

API_KEY_HEADERS = {"X-API-Key": "test-api-key-123"}


@pytest.fixture
def limiter(fake_clock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(limit=2, window_seconds=60, clock=fake_clock)


@pytest.fixture
def repository() -> InMemoryBookmarkRepository:
    return InMemoryBookmarkRepository()


@pytest.fixture
def client(fake_llm, fake_fetcher, limiter, repository):
    app = create_app(
        components=AppComponents(
            llm=fake_llm,
            fetcher=fake_fetcher,
            repository=repository,
            limiter=limiter,
        )
    )
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, url: str, **extra):
    return client.post("/v1/bookmarks", json={"url": url, **extra}, headers=API_KEY_HEADERS)


class TestCreateBookmark:
    def test_creates_bookmark(self, client: TestClient) -> None:
        response = _create(client, "https://www.youtube.com/watch?v=1", user_id="u1")

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["title"] == "Sliding Windows Explained"
        assert data["topic"] == "Engineering"
        assert data["source"] == "YouTube"
        assert data["user_id"] == "u1"
        assert data["summary_cached"] is False
        assert "created_at" in data

    def test_missing_url_is_rejected(self, client: TestClient) -> None:
        response = client.post("/v1/bookmarks", json={}, headers=API_KEY_HEADERS)

        assert response.status_code == 422

    def test_invalid_url_returns_400(self, client: TestClient) -> None:
        response = _create(client, "not-a-url")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_url"

    def test_requires_api_key(self, client: TestClient) -> None:
        response = client.post("/v1/bookmarks", json={"url": "https://example.com"})

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "missing_api_key"

    def test_rejects_invalid_api_key(self, client: TestClient) -> None:
        response = client.post(
            "/v1/bookmarks",
            json={"url": "https://example.com"},
            headers={"X-API-Key": "wrong"},
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "invalid_api_key"

    def test_auth_follows_app_settings(self, fake_llm, fake_fetcher, limiter) -> None:
        cfg = Settings(app=AppSettings(api_key_required=False))
        app = create_app(cfg, AppComponents(llm=fake_llm, fetcher=fake_fetcher, limiter=limiter))

        with TestClient(app) as client:
            response = client.post("/v1/bookmarks", json={"url": "https://example.com"})

        assert response.status_code == 201

    def test_scrape_failure_returns_502(self, client: TestClient, fake_fetcher) -> None:
        fake_fetcher.error = ScrapeAppError(code="page_fetch_timeout", message="Timed out while fetching the page.")

        response = _create(client, "https://example.com/slow")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "page_fetch_timeout"
        assert "Retry-After" not in response.headers

    def test_llm_failure_returns_502(self, client: TestClient, fake_llm) -> None:
        fake_llm.error = LLMAppError(code="llm_request_failed", message="OpenAI API error: boom")

        response = _create(client, "https://example.com/a")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "llm_request_failed"


class TestSummarizerRateLimit:
    def test_third_summary_in_window_is_throttled(self, client: TestClient, fake_fetcher, fake_llm, fake_clock) -> None:
        for i in range(2):
            fake_fetcher.metadata = PageMetadata(title=f"page {i}")
            assert _create(client, f"https://example.com/{i}").status_code == 201

        fake_clock.advance(20)
        fake_fetcher.metadata = PageMetadata(title="page 2")
        blocked = _create(client, "https://example.com/2")

        assert blocked.status_code == 429
        body = blocked.json()["error"]
        assert body["code"] == "summarizer_rate_limited"
        assert body["message"] == "Rate limit reached. Please try again later."
        assert body["details"]["retry_after"] == 40
        assert blocked.headers["Retry-After"] == "40"
        assert blocked.headers["X-RateLimit-Limit"] == "2"
        assert blocked.headers["X-RateLimit-Remaining"] == "0"
        assert blocked.headers["X-RateLimit-Reset"] == "1060"
        assert len(fake_llm.prompts) == 2

    def test_throttled_request_recovers_after_window(self, client: TestClient, fake_fetcher, fake_clock) -> None:
        for i in range(3):
            fake_fetcher.metadata = PageMetadata(title=f"page {i}")
            _create(client, f"https://example.com/{i}")

        fake_clock.advance(60.5)
        fake_fetcher.metadata = PageMetadata(title="later")

        assert _create(client, "https://example.com/later").status_code == 201

    def test_cached_summary_is_not_throttled(self, client: TestClient, fake_llm) -> None:
        for _ in range(4):
            response = _create(client, "https://example.com/same")
            assert response.status_code == 201

        assert response.json()["summary_cached"] is True
        assert len(fake_llm.prompts) == 1

    def test_rate_limit_headers_follow_app_settings(self, fake_llm, fake_fetcher, limiter) -> None:
        cfg = Settings(app=AppSettings(rate_limit_include_headers=False))
        app = create_app(cfg, AppComponents(llm=fake_llm, fetcher=fake_fetcher, limiter=limiter))

        with TestClient(app) as client:
            for i in range(3):
                fake_fetcher.metadata = PageMetadata(title=f"page {i}")
                response = _create(client, f"https://example.com/{i}")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert "X-RateLimit-Limit" not in response.headers


class TestListAndDelete:
    def test_lists_user_bookmarks(self, client: TestClient, fake_fetcher) -> None:
        fake_fetcher.metadata = PageMetadata(title="one")
        _create(client, "https://example.com/1", user_id="u1")
        fake_fetcher.metadata = PageMetadata(title="two")
        _create(client, "https://example.com/2", user_id="u2")

        response = client.get("/v1/users/u1/bookmarks", headers=API_KEY_HEADERS)

        assert response.status_code == 200
        assert [b["url"] for b in response.json()] == ["https://example.com/1"]

    def test_delete_bookmark(self, client: TestClient) -> None:
        _create(client, "https://example.com/1", user_id="u1")

        response = client.delete(
            "/v1/users/u1/bookmarks",
            params={"url": "https://example.com/1"},
            headers=API_KEY_HEADERS,
        )

        assert response.status_code == 204
        assert client.get("/v1/users/u1/bookmarks", headers=API_KEY_HEADERS).json() == []

    def test_delete_missing_bookmark_returns_404(self, client: TestClient) -> None:
        response = client.delete(
            "/v1/users/u1/bookmarks",
            params={"url": "https://example.com/none"},
            headers=API_KEY_HEADERS,
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "bookmark_not_found"


class TestActivity:
    def test_weekly_count_recompute(self, client: TestClient, repository) -> None:
        for day in (13, 14):
            repository.add(
                BookmarkRecord(
                    url=f"https://example.com/{day}",
                    title="t",
                    summary="s",
                    topic="Topic",
                    source="Example",
                    created_at=datetime(2025, 1, day, tzinfo=timezone.utc),
                    user_id="u1",
                )
            )

        response = client.post("/v1/bookmarks/weekly-count", headers=API_KEY_HEADERS)

        assert response.status_code == 200
        assert response.json() == {
            "message": "Weekly running counts updated successfully",
            "updated_bookmarks": 2,
            "total_bookmarks": 2,
        }
        assert sorted(r.wkcnt for r in repository.list_all()) == [1, 2]

    def test_activity_shape(self, client: TestClient) -> None:
        response = client.get("/v1/users/u1/activity", params={"weeks": 4}, headers=API_KEY_HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["weeks"] == 4
        assert len(data["labels"]) == 4
        assert data["data"] == [0, 0, 0, 0]

    def test_activity_rejects_out_of_range_weeks(self, client: TestClient) -> None:
        response = client.get("/v1/users/u1/activity", params={"weeks": 0}, headers=API_KEY_HEADERS)

        assert response.status_code == 422


def test_health_needs_no_api_key(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_lifespan_closes_fetcher(fake_llm, fake_fetcher, limiter) -> None:
    app = create_app(components=AppComponents(llm=fake_llm, fetcher=fake_fetcher, limiter=limiter))

    with TestClient(app):
        pass

    assert fake_fetcher.closed is True

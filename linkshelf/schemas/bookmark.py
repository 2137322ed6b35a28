"""Pydantic schemas for bookmarks, summaries and activity."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SummaryResult(BaseModel):
    """Structured output expected from the content summarizer.

    Every field is optional on the wire; the bookmark service falls back to
    scraped metadata for whatever the model leaves out.
    """

    title: str | None = Field(
        default=None,
        description="Concise title proposed by the model.",
    )
    summary: str = Field(
        default="",
        description="Summary of the page, at most ~30 words.",
    )
    topic: str = Field(
        default="",
        description="Single topic category for the page.",
    )

    @field_validator("title", "summary", "topic", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if value is None:
            return value
        if not isinstance(value, str):
            raise ValueError("must be a string")
        return value.strip()


class CreateBookmarkRequest(BaseModel):
    """Request body for creating a bookmark."""

    url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Absolute http(s) URL to bookmark.",
    )
    user_id: str | None = Field(
        default=None,
        description="Owner of the bookmark.",
    )
    user_display_name: str | None = Field(
        default=None,
        description="Owner display name shown on profile pages.",
    )


class BookmarkResponse(BaseModel):
    """A stored bookmark."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    url: str
    title: str
    summary: str
    topic: str
    source: str
    created_at: datetime
    user_id: str | None = None
    user_display_name: str | None = None
    wkcnt: int | None = Field(
        default=None,
        description="Running count of the owner's bookmarks within the same week.",
    )
    summary_cached: bool = Field(
        default=False,
        description="True if the summary was reused instead of calling the model.",
    )


class WeeklyCountResponse(BaseModel):
    """Result of recomputing weekly running counts."""

    message: str
    updated_bookmarks: int
    total_bookmarks: int


class ActivityResponse(BaseModel):
    """Weekly activity buckets for a user's bookmark chart."""

    user_id: str
    weeks: int
    labels: list[str] = Field(
        ...,
        description="Week labels formatted MMDD-MMDD, oldest first.",
    )
    data: list[int] = Field(
        ...,
        description="Highest weekly running count observed in each week.",
    )

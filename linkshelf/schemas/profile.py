"""Pydantic schemas for user profiles."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from linkshelf.schemas.bookmark import BookmarkResponse


class UpdateProfileRequest(BaseModel):
    """Request body for creating or updating a profile."""

    display_name: str = Field(
        ...,
        max_length=64,
        description="Public name used in /profiles/{display_name}; letters, digits, _ and - only.",
    )
    bio: str = Field(
        default="",
        max_length=500,
        description="Short description shown on the public profile.",
    )


class ProfileResponse(BaseModel):
    """A user's own profile."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str
    bio: str
    created_at: datetime
    bookmark_count: int = Field(
        default=0,
        description="Number of bookmarks the user has saved.",
    )


class PublicProfileResponse(BaseModel):
    """Public profile page: owner details plus their bookmarks, newest first."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str
    bio: str
    joined_at: datetime | None = Field(
        default=None,
        description="Profile creation time; null for users without a profile.",
    )
    bookmarks: list[BookmarkResponse]

"""Bookmark repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping


@dataclass
class BookmarkRecord:
    """A stored bookmark.

    ``id`` is assigned by the repository on insert. ``wkcnt`` is the running
    count of the owner's bookmarks within the same week, filled in by the
    weekly-count recompute.
    """

    url: str
    title: str
    summary: str
    topic: str
    source: str
    created_at: datetime
    user_id: str | None = None
    user_display_name: str | None = None
    wkcnt: int | None = None
    id: int | None = None


class AbstractBookmarkRepository(ABC):
    """Persistence operations the bookmark and activity services rely on."""

    @abstractmethod
    def add(self, record: BookmarkRecord) -> BookmarkRecord:
        """Store ``record`` and return it with an id assigned."""
        raise NotImplementedError

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[BookmarkRecord]:
        """Return the user's bookmarks, newest first."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[BookmarkRecord]:
        """Return every stored bookmark in insertion order."""
        raise NotImplementedError

    @abstractmethod
    def delete_by_url(self, user_id: str, url: str) -> int:
        """Delete the user's bookmarks for ``url``; return how many were removed."""
        raise NotImplementedError

    @abstractmethod
    def update_weekly_counts(self, counts: Mapping[int, int]) -> int:
        """Set ``wkcnt`` per bookmark id; return how many records were updated."""
        raise NotImplementedError

    @abstractmethod
    def count_by_user(self, user_id: str) -> int:
        """Return how many bookmarks the user has saved."""
        raise NotImplementedError

    @abstractmethod
    def find_owner_by_display_name(self, display_name: str) -> str | None:
        """Return the owner of the newest bookmark saved under ``display_name``."""
        raise NotImplementedError


@dataclass
class ProfileRecord:
    """Public profile of a user, one per ``user_id``."""

    user_id: str
    display_name: str
    created_at: datetime
    bio: str = ""
    id: int | None = None


class AbstractProfileRepository(ABC):
    """Persistence operations for user profiles."""

    @abstractmethod
    def upsert(self, profile: ProfileRecord) -> tuple[ProfileRecord, bool]:
        """Insert or update the profile for ``profile.user_id``.

        Updates keep the stored ``id`` and ``created_at``.

        Returns:
            Tuple of (stored profile, whether it was created).
        """
        raise NotImplementedError

    @abstractmethod
    def get_by_user(self, user_id: str) -> ProfileRecord | None:
        raise NotImplementedError

    @abstractmethod
    def get_by_display_name(self, display_name: str) -> ProfileRecord | None:
        raise NotImplementedError

"""In-memory bookmark and profile repositories.

Per-process only and lost on restart. Thread-safe: uses a lock around
shared state.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from typing import Mapping

from linkshelf.adapters.storage.base import (
    AbstractBookmarkRepository,
    AbstractProfileRepository,
    BookmarkRecord,
    ProfileRecord,
)


class InMemoryBookmarkRepository(AbstractBookmarkRepository):
    """Dict-backed repository keyed by an auto-incrementing id."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[int, BookmarkRecord] = {}
        self._ids = itertools.count(1)

    def add(self, record: BookmarkRecord) -> BookmarkRecord:
        with self._lock:
            stored = replace(record, id=next(self._ids))
            self._records[stored.id] = stored
            return replace(stored)

    def list_by_user(self, user_id: str) -> list[BookmarkRecord]:
        with self._lock:
            owned = [replace(r) for r in self._records.values() if r.user_id == user_id]
        owned.sort(key=lambda r: r.created_at, reverse=True)
        return owned

    def list_all(self) -> list[BookmarkRecord]:
        with self._lock:
            return [replace(r) for r in self._records.values()]

    def delete_by_url(self, user_id: str, url: str) -> int:
        with self._lock:
            doomed = [
                record_id
                for record_id, r in self._records.items()
                if r.user_id == user_id and r.url == url
            ]
            for record_id in doomed:
                del self._records[record_id]
            return len(doomed)

    def update_weekly_counts(self, counts: Mapping[int, int]) -> int:
        updated = 0
        with self._lock:
            for record_id, wkcnt in counts.items():
                record = self._records.get(record_id)
                if record is None:
                    continue
                record.wkcnt = wkcnt
                updated += 1
        return updated

    def count_by_user(self, user_id: str) -> int:
        with self._lock:
            return sum(1 for r in self._records.values() if r.user_id == user_id)

    def find_owner_by_display_name(self, display_name: str) -> str | None:
        with self._lock:
            matches = [
                r
                for r in self._records.values()
                if r.user_display_name == display_name and r.user_id is not None
            ]
        if not matches:
            return None
        return max(matches, key=lambda r: r.created_at).user_id


class InMemoryProfileRepository(AbstractProfileRepository):
    """Profiles keyed by ``user_id``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._profiles: dict[str, ProfileRecord] = {}
        self._ids = itertools.count(1)

    def upsert(self, profile: ProfileRecord) -> tuple[ProfileRecord, bool]:
        with self._lock:
            existing = self._profiles.get(profile.user_id)
            if existing is None:
                stored = replace(profile, id=next(self._ids))
            else:
                stored = replace(profile, id=existing.id, created_at=existing.created_at)
            self._profiles[stored.user_id] = stored
            return replace(stored), existing is None

    def get_by_user(self, user_id: str) -> ProfileRecord | None:
        with self._lock:
            profile = self._profiles.get(user_id)
            return replace(profile) if profile else None

    def get_by_display_name(self, display_name: str) -> ProfileRecord | None:
        with self._lock:
            for profile in self._profiles.values():
                if profile.display_name == display_name:
                    return replace(profile)
        return None

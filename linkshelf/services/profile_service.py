"""User profiles and public profile pages.

A profile ties a unique, URL-safe display name and a short bio to a
``user_id``. Public pages resolve a display name to its owner, falling
back to the display name recorded on saved bookmarks for users who never
created a profile.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from linkshelf.adapters.storage.base import (
    AbstractBookmarkRepository,
    AbstractProfileRepository,
    BookmarkRecord,
    ProfileRecord,
)
from linkshelf.core.errors import NotFoundAppError, ValidationAppError

logger = logging.getLogger(__name__)

_DISPLAY_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_display_name(display_name: str) -> str:
    """Return ``display_name`` if it is non-empty and URL-safe.

    Raises:
        ValidationAppError: If the name is blank or contains anything other
            than letters, digits, underscores and hyphens.
    """
    if not display_name or not display_name.strip():
        raise ValidationAppError(
            code="invalid_display_name",
            message="Display name cannot be empty",
        )
    if not _DISPLAY_NAME_RE.fullmatch(display_name):
        raise ValidationAppError(
            code="invalid_display_name",
            message="Display name can only contain letters, numbers, underscores, and hyphens",
            details={"hint": "Example: ada_lovelace-1815"},
        )
    return display_name


@dataclass
class PublicProfile:
    user_id: str
    display_name: str
    bio: str
    joined_at: datetime | None
    bookmarks: list[BookmarkRecord]


class ProfileService:
    """Create, read and resolve user profiles."""

    def __init__(
        self,
        *,
        profiles: AbstractProfileRepository,
        bookmarks: AbstractBookmarkRepository,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.profiles = profiles
        self.bookmarks = bookmarks
        self._now = now

    def save_profile(self, user_id: str, *, display_name: str, bio: str = "") -> tuple[ProfileRecord, bool]:
        """Insert or update the user's profile.

        Returns:
            Tuple of (stored profile, whether it was created).

        Raises:
            ValidationAppError: If the display name is invalid or taken by
                another user.
        """
        display_name = validate_display_name(display_name)

        holder = self.profiles.get_by_display_name(display_name)
        if holder is not None and holder.user_id != user_id:
            raise ValidationAppError(
                code="display_name_taken",
                message="Display name is already in use.",
            )

        profile, created = self.profiles.upsert(
            ProfileRecord(
                user_id=user_id,
                display_name=display_name,
                bio=bio.strip(),
                created_at=self._now(),
            )
        )
        logger.info("profile.saved", extra={"profile_id": profile.id, "created": created})
        return profile, created

    def get_profile(self, user_id: str) -> tuple[ProfileRecord, int]:
        """Return the user's profile and saved bookmark count.

        Raises:
            NotFoundAppError: If the user has no profile.
        """
        profile = self.profiles.get_by_user(user_id)
        if profile is None:
            raise NotFoundAppError(code="profile_not_found", message="Profile not found.")
        return profile, self.bookmarks.count_by_user(user_id)

    def public_profile(self, display_name: str) -> PublicProfile:
        """Resolve a display name to its owner's public page.

        Raises:
            NotFoundAppError: If neither a profile nor any bookmark carries
                that display name.
        """
        profile = self.profiles.get_by_display_name(display_name)
        if profile is not None:
            user_id = profile.user_id
        else:
            user_id = self.bookmarks.find_owner_by_display_name(display_name)
            if user_id is None:
                raise NotFoundAppError(
                    code="profile_not_found",
                    message="No user with that display name.",
                )

        return PublicProfile(
            user_id=user_id,
            display_name=profile.display_name if profile else display_name,
            bio=profile.bio if profile else "",
            joined_at=profile.created_at if profile else None,
            bookmarks=self.bookmarks.list_by_user(user_id),
        )

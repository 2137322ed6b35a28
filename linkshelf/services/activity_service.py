"""Weekly bookmark activity: running counts and chart buckets."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable

from linkshelf.adapters.storage.base import AbstractBookmarkRepository, BookmarkRecord

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_WEEKS = 12


def _utc_date(moment: datetime) -> date:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).date()


def week_start(moment: datetime) -> date:
    """Return the Sunday on or before ``moment`` (UTC)."""
    day = _utc_date(moment)
    return day - timedelta(days=(day.weekday() + 1) % 7)


def compute_weekly_counts(records: Iterable[BookmarkRecord]) -> dict[int, int]:
    """Assign each bookmark its running count within the owner's week.

    Bookmarks are ordered by owner then creation time; the first bookmark a
    user creates in a Sunday-started week gets 1, the next 2, and so on.

    Args:
        records: Stored bookmarks (must have ids).

    Returns:
        Mapping of bookmark id to running weekly count.
    """
    ordered = sorted(
        (r for r in records if r.id is not None),
        key=lambda r: (r.user_id is None, r.user_id or "", r.created_at),
    )
    running: dict[tuple[str | None, date], int] = defaultdict(int)
    counts: dict[int, int] = {}
    for record in ordered:
        bucket = (record.user_id, week_start(record.created_at))
        running[bucket] += 1
        counts[record.id] = running[bucket]
    return counts


def _format_mmdd(day: date) -> str:
    return day.strftime("%m%d")


def build_activity_buckets(
    records: Iterable[BookmarkRecord],
    *,
    weeks: int = DEFAULT_ACTIVITY_WEEKS,
    today: date,
) -> tuple[list[str], list[int]]:
    """Bucket bookmarks into consecutive 7-day windows ending today.

    Each bucket's value is the highest ``wkcnt`` among bookmarks created in
    it; bookmarks without a ``wkcnt`` are ignored.

    Returns:
        Tuple of (labels formatted ``MMDD-MMDD``, values), oldest first.
    """
    if weeks < 1:
        raise ValueError("weeks must be >= 1")

    first_day = today - timedelta(days=weeks * 7 - 1)
    labels: list[str] = []
    for i in range(weeks):
        start = first_day + timedelta(days=i * 7)
        labels.append(f"{_format_mmdd(start)}-{_format_mmdd(start + timedelta(days=6))}")

    data = [0] * weeks
    for record in records:
        if record.wkcnt is None:
            continue
        offset = (_utc_date(record.created_at) - first_day).days
        if offset < 0 or offset >= weeks * 7:
            continue
        index = offset // 7
        data[index] = max(data[index], record.wkcnt)

    return labels, data


class ActivityService:
    """Maintain weekly running counts and serve activity charts."""

    def __init__(
        self,
        repository: AbstractBookmarkRepository,
        *,
        today: Callable[[], date] = lambda: datetime.now(timezone.utc).date(),
    ) -> None:
        self.repository = repository
        self._today = today

    def recompute_weekly_counts(self) -> tuple[int, int]:
        """Recompute ``wkcnt`` for every stored bookmark.

        Returns:
            Tuple of (updated bookmarks, total bookmarks).
        """
        records = self.repository.list_all()
        counts = compute_weekly_counts(records)
        updated = self.repository.update_weekly_counts(counts)

        logger.info(
            "activity.weekly_counts_recomputed",
            extra={"updated_bookmarks": updated, "total_bookmarks": len(records)},
        )
        return updated, len(records)

    def weekly_activity(
        self,
        user_id: str,
        *,
        weeks: int = DEFAULT_ACTIVITY_WEEKS,
    ) -> tuple[list[str], list[int]]:
        """Return chart buckets for the user's last ``weeks`` weeks."""
        return build_activity_buckets(
            self.repository.list_by_user(user_id),
            weeks=weeks,
            today=self._today(),
        )

"""In-memory summary cache.

Summaries for a page that was already summarized are served from here so
the metered summarizer is only called for new content. Entries expire after
a fixed TTL; when full, the least recently read entry goes first.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from hashlib import sha256
from typing import Callable, NamedTuple

from linkshelf.schemas.bookmark import SummaryResult

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    summary: SummaryResult
    expires_at: float


class SimpleTTLCache:
    """Thread-safe TTL cache of ``SummaryResult`` values with LRU eviction.

    Args:
        ttl_seconds: Lifetime of every entry. ``0`` disables reuse.
        max_entries: Capacity; ``None`` means unbounded.
        clock: Returns the current time in seconds.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        max_entries: int | None = 1024,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> SummaryResult | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and now >= entry.expires_at:
                del self._entries[key]
                self._evictions += 1
                entry = None

            if entry is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key[:16]})
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            logger.debug("cache.hit", extra={"cache_key": key[:16]})
            return entry.summary

    def set(self, key: str, summary: SummaryResult) -> None:
        now = self._clock()
        with self._lock:
            self._drop_expired_locked(now)
            self._entries[key] = _Entry(summary, now + self._ttl)
            self._entries.move_to_end(key)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)
                    self._evictions += 1

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = self._misses = self._evictions = 0

    def stats(self) -> dict[str, int | None]:
        """Counters for diagnostics; never includes cached values."""

        with self._lock:
            return {
                "ttl_seconds": self._ttl,
                "max_entries": self._max_entries,
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _drop_expired_locked(self, now: float) -> None:
        stale = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in stale:
            del self._entries[key]
        self._evictions += len(stale)


def build_cache_key(url: str, title: str, description: str, *, salt: str | None = None) -> str:
    """Hash the page identity into a cache key.

    Fields are NUL-separated so ``("ab", "c")`` and ``("a", "bc")`` differ.
    ``salt`` partitions keys by prompt version.
    """

    digest = sha256()
    for part in (salt or "", url, title, description):
        digest.update(part.encode("utf-8", errors="ignore"))
        digest.update(b"\x00")
    return digest.hexdigest()

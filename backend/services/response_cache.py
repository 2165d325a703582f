"""In-process response cache for GitHub API calls.

Entries are keyed by request URL and expire after a fixed TTL. The
entry count is capped; once full, the least recently used entry is
evicted. Expired entries are dropped lazily on read and eagerly when
space is needed.

The cache is owned by a ``GitHubService`` instance and is only touched
from the event loop thread, so it carries no locking.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app.logging_config import get_logger
from app.metrics import GITHUB_CACHE_EVICTIONS, GITHUB_CACHE_HITS, GITHUB_CACHE_MISSES

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_ENTRIES = 256


@dataclass
class _CacheEntry:
    data: Any
    expires_at: float


class ResponseCache:
    """TTL cache with least-recently-used eviction."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and entry.expires_at > self._clock()

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            GITHUB_CACHE_MISSES.inc()
            return None

        if entry.expires_at <= self._clock():
            del self._entries[key]
            GITHUB_CACHE_EVICTIONS.labels(reason="expired").inc()
            GITHUB_CACHE_MISSES.inc()
            return None

        self._entries.move_to_end(key)
        GITHUB_CACHE_HITS.inc()
        return entry.data

    def set(self, key: str, data: Any) -> None:
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self._make_room()
        self._entries[key] = _CacheEntry(data=data, expires_at=self._clock() + self.ttl_seconds)

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            GITHUB_CACHE_EVICTIONS.labels(reason="expired").inc(len(expired))
        return len(expired)

    def _make_room(self) -> None:
        if self.purge_expired():
            return
        key, _ = self._entries.popitem(last=False)
        GITHUB_CACHE_EVICTIONS.labels(reason="lru").inc()
        logger.debug("github_cache_evicted", cache_key=key)

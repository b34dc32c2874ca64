"""In-memory query cache with a fixed default TTL.

Two expiry rules apply to every entry:

- ``get`` treats an entry as stale once its age reaches the cache's
  *default* TTL, whatever TTL it was stored with.
- ``set`` schedules physical removal after the entry's own TTL. Removal
  is applied lazily on the next cache access rather than by a timer.

A longer per-entry TTL therefore only keeps the raw entry around (visible
to ``has``); it never extends what ``get`` will return.
"""

import time
from collections.abc import Callable
from typing import Any

from flourish_cache.config import settings
from flourish_cache.entities import CacheEntry


class QueryCache:
    """Key/value cache for read-mostly remote query results.

    Not thread-safe: callers on more than one thread must serialize access.

    Example:
        ```python
        cache = QueryCache(default_ttl=300)
        cache.set("stream:page1", page)
        cache.get("stream:page1")  # page, until 300s have elapsed
        ```
    """

    def __init__(
        self,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl: Staleness window in seconds. Defaults to settings.
            clock: Monotonic time source in seconds (injectable for tests).
        """
        if default_ttl is None:
            default_ttl = settings.cache_ttl
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be a positive number of seconds, got {default_ttl}")

        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

    def _fresh_entry(self, key: str) -> CacheEntry | None:
        self._purge_expired()
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.age(self._clock()) >= self._default_ttl:
            del self._entries[key]
            return None

        return entry

    def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        """Store ``data`` under ``key``, replacing any existing entry.

        Args:
            key: Cache key
            data: Value to store
            ttl: Seconds until the entry is removed. Defaults to the cache TTL.
        """
        now = self._clock()
        self._entries[key] = CacheEntry(
            data=data,
            timestamp=now,
            error=None,
            expires_at=now + (ttl if ttl is not None else self._default_ttl),
        )

    def get(self, key: str) -> Any | None:
        """Return the cached data, or None if absent or stale."""
        entry = self._fresh_entry(key)
        if entry is None:
            return None
        return entry.data

    def get_error(self, key: str) -> BaseException | None:
        """Return the cached error of a negative entry, or None."""
        entry = self._fresh_entry(key)
        if entry is None:
            return None
        return entry.error

    def has(self, key: str) -> bool:
        """Whether a raw entry exists (default-TTL staleness is not checked)."""
        self._purge_expired()
        return key in self._entries

    def delete(self, key: str) -> None:
        """Remove a single entry; no-op if absent."""
        self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``.

        Returns:
            Number of entries removed
        """
        keys = [key for key in self._entries if key.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def set_error(self, key: str, error: BaseException) -> None:
        """Cache a failure so repeated lookups skip the remote call.

        Negative entries have no scheduled removal; they age out through
        the default TTL only.
        """
        self._entries[key] = CacheEntry(
            data=None,
            timestamp=self._clock(),
            error=error,
        )

    def get_size(self) -> int:
        """Number of raw entries currently held."""
        self._purge_expired()
        return len(self._entries)

    def keys(self) -> list[str]:
        """Snapshot of the current keys."""
        self._purge_expired()
        return list(self._entries)

    @property
    def default_ttl(self) -> float:
        """Get the staleness window in seconds."""
        return self._default_ttl


def create_query_cache(ttl: float | None = None) -> QueryCache:
    """Create a standalone cache instance."""
    return QueryCache(default_ttl=ttl)


# Process-wide cache, created at import and only ever emptied via clear()
global_query_cache = QueryCache()

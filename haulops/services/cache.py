"""
Read-through cache for rarely-changing list data.

Entries carry the time they were stored; the maximum age is supplied by the
reader on every ``get`` so the same entry can be read with different
freshness requirements. Fetch-on-miss is left to the caller, with
``get_or_fetch`` as the usual shortcut.

Invalidation bumps a per-key generation counter. A fetch that started before
an invalidation may still hand its (stale) rows to its own caller, but it
will not store them, so an invalidated entry is never brought back.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel type for cache misses."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@dataclass
class CacheEntry:
    value: Any
    timestamp: float  # milliseconds, from the cache clock


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class ReadThroughCache:
    """
    Process-wide key/value store with per-read expiry.

    Safe to share between overlapping requests: every access to the
    underlying dict happens under a lock, and no lock is held while the
    caller's fetcher runs.
    """

    def __init__(self, clock: Callable[[], float] = _monotonic_ms):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, key: str, max_age_ms: float) -> Any:
        """
        Return the stored value, or ``MISSING`` when absent or older than max_age_ms.

        Expired entries are never returned.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISSING
            if self._clock() - entry.timestamp > max_age_ms:
                return MISSING
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store value under key with the current timestamp, replacing any prior entry."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, timestamp=self._clock())

    def invalidate(self, key: str) -> None:
        """Drop the entry for key. No-op when absent."""
        with self._lock:
            self._entries.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        logger.debug(f"Cache key '{key}' invalidated")

    def generation(self, key: str) -> int:
        with self._lock:
            return self._generations.get(key, 0)

    def set_if_current(self, key: str, value: Any, generation: int) -> bool:
        """
        Store value only if key has not been invalidated since ``generation``.

        Returns:
            True if the value was stored.
        """
        with self._lock:
            if self._generations.get(key, 0) != generation:
                return False
            self._entries[key] = CacheEntry(value=value, timestamp=self._clock())
            return True

    async def get_or_fetch(
        self,
        key: str,
        max_age_ms: float,
        fetcher: Callable[[], Awaitable[Any]],
        should_store: Callable[[Any], bool] = lambda value: True,
    ) -> Any:
        """
        Return the cached value for key, fetching and storing it on a miss.

        Args:
            key: Cache key
            max_age_ms: Maximum acceptable age of a cached value
            fetcher: Coroutine factory producing a fresh value
            should_store: Predicate deciding whether a fetched value is cached
                (used to keep failed fetches out of the cache)
        """
        cached = self.get(key, max_age_ms)
        if cached is not MISSING:
            logger.debug(f"Cache hit for '{key}'")
            return cached

        logger.debug(f"Cache miss for '{key}'")
        generation = self.generation(key)
        value = await fetcher()

        if should_store(value) and not self.set_if_current(key, value, generation):
            logger.debug(f"Discarding value fetched for '{key}': invalidated during fetch")

        return value

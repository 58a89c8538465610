"""TTL cache store shared by the scoring engines.

This module provides an in-process async key/value store used to keep computed
match scores and recommendation lists between requests. Keys are namespaced
strings (``match_score:{user}:{job}``, ``recommendations:{user}:{types}``) so
that whole families of entries can be dropped with a glob pattern when the
underlying data changes.
"""

import asyncio
import fnmatch
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class _Entry:
    value: Any
    expires_at: Optional[float]

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class CacheStore:
    """Async TTL cache.

    This cache handles:
    - Per-entry expiry (expired entries are evicted on read)
    - FIFO eviction once ``max_entries`` is reached
    - Pattern based invalidation
    - Serialized access through an ``asyncio.Lock``

    Attributes:
        max_entries: Maximum number of entries to keep (0 = unlimited)
        default_ttl: TTL in seconds applied when ``set`` gets no explicit ttl
            (None = no expiry)
    """

    def __init__(
        self,
        max_entries: int = 0,
        default_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache store.

        Args:
            max_entries: Maximum number of entries to cache (0 = unlimited)
            default_ttl: Default time-to-live in seconds
            clock: Monotonic time source, in seconds
        """
        self._entries: Dict[str, _Entry] = {}
        self._max_entries = max_entries
        self._default_ttl = default_ttl
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def default_ttl(self) -> Optional[float]:
        return self._default_ttl

    async def get(self, key: str) -> Optional[Any]:
        """Get a value from the cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if missing or expired
        """
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Seconds to live. None uses the default TTL, 0 disables expiry.
        """
        effective_ttl = self._default_ttl if ttl is None else ttl
        expires_at = self._clock() + effective_ttl if effective_ttl else None

        async with self._lock:
            if key in self._entries:
                # Re-insert so the refreshed key moves to the back of the FIFO order
                del self._entries[key]
            elif self._max_entries > 0 and len(self._entries) >= self._max_entries:
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
                logger.debug(f"Cache full, evicted oldest entry: {oldest_key}")

            self._entries[key] = _Entry(value=value, expires_at=expires_at)

    async def delete(self, key: str) -> bool:
        """Remove a single key.

        Returns:
            True if the key was present
        """
        async with self._lock:
            return self._entries.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern such as ``match_score:u1:*``.

        Returns:
            Number of removed keys
        """
        async with self._lock:
            matched = [key for key in self._entries if fnmatch.fnmatchcase(key, pattern)]
            for key in matched:
                del self._entries[key]

        if matched:
            logger.debug(f"Invalidated {len(matched)} cache entries matching {pattern}")
        return len(matched)

    async def clear(self) -> None:
        """Drop every cached entry."""
        async with self._lock:
            self._entries.clear()

    async def has(self, key: str) -> bool:
        """Check whether a live (non-expired) entry exists for the key."""
        return await self.get(key) is not None

    def size(self) -> int:
        """Get the current number of stored entries, expired ones included."""
        return len(self._entries)


_cache: Optional[CacheStore] = None


def get_cache() -> CacheStore:
    """Return the process-wide cache store, creating it from settings on first use."""
    global _cache
    if _cache is None:
        from neurmatic.server.core.config import settings

        _cache = CacheStore(max_entries=settings.cache.max_entries)
    return _cache


def reset_cache() -> None:
    """Forget the process-wide cache store."""
    global _cache
    _cache = None

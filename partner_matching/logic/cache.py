"""
Eviction Cache

Key/value store with lazy TTL expiry and value-based capacity eviction.
Used to memoize match results, pairwise scores and availability parsing.

Eviction removes the entry with the lowest `access_count / (age + 1)`, which
keeps entries that are both frequently and recently used.
"""

import functools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from .contracts import CacheStats

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class CacheEntry:
    """Stored value plus the bookkeeping used for expiry and eviction."""
    value: Any
    timestamp: float
    access_count: int = 1


class EvictionCache:
    """
    Thread-safe cache with fixed capacity and time-to-live.

    TTL is checked lazily on read; capacity is enforced eagerly on write.
    All operations are serialised by one re-entrant lock.
    """

    def __init__(
        self,
        capacity: int = 1000,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            capacity: Maximum number of live entries
            ttl_seconds: Age after which an entry is stale
            clock: Time source in seconds (injectable for tests)
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: Hashable, default: Any = None) -> Any:
        """
        Return the cached value, or `default` if absent or expired.

        A hit increments the entry's access count but keeps its timestamp.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return default

            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                self._misses += 1
                return default

            entry.access_count += 1
            self._hits += 1
            return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value, evicting the least valuable entry when full."""
        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self.capacity:
                self._evict_least_valuable(now)
            self._entries[key] = CacheEntry(value=value, timestamp=now)

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def purge_expired(self) -> int:
        """Drop every expired entry now. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
            for key in expired:
                del self._entries[key]
            if expired:
                logger.debug(f"Purged {len(expired)} expired cache entries")
            return len(expired)

    def stats(self) -> CacheStats:
        with self._lock:
            lookups = self._hits + self._misses
            counts = [e.access_count for e in self._entries.values()]
            return CacheStats(
                size=len(self._entries),
                capacity=self.capacity,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                hit_rate=self._hits / lookups if lookups else 0.0,
                average_access_count=sum(counts) / len(counts) if counts else 0.0,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not self._is_expired(entry, self._clock())

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp > self.ttl_seconds

    def _evict_least_valuable(self, now: float) -> None:
        """Remove the entry with the lowest access_count / (age + 1); first found wins ties."""
        key_to_evict = _MISSING
        min_score = float("inf")

        for key, entry in self._entries.items():
            age = now - entry.timestamp
            score = entry.access_count / (age + 1)
            if score < min_score:
                min_score = score
                key_to_evict = key

        if key_to_evict is not _MISSING:
            del self._entries[key_to_evict]
            self._evictions += 1
            logger.debug(f"Evicted cache entry {key_to_evict!r} (score={min_score:.4f})")


def _default_key(args: tuple, kwargs: dict) -> Hashable:
    if not kwargs:
        return args
    return args + (tuple(sorted(kwargs.items())),)


def memoize(
    ttl_seconds: float = 300.0,
    max_size: int = 100,
    key: Optional[Callable[..., Hashable]] = None,
):
    """
    Cache a function's results in an EvictionCache.

    Arguments must be hashable unless a `key` function is supplied. The
    backing cache is exposed as `wrapper.cache`.
    """
    def decorator(fn):
        cache = EvictionCache(capacity=max_size, ttl_seconds=ttl_seconds)

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            cache_key = key(*args, **kwargs) if key else _default_key(args, kwargs)
            cached = cache.get(cache_key, _MISSING)
            if cached is not _MISSING:
                return cached
            result = fn(*args, **kwargs)
            cache.set(cache_key, result)
            return result

        wrapper.cache = cache
        return wrapper

    return decorator

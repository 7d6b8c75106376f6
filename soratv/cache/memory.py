"""
In-memory bounded cache with weighted usage/recency eviction.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from soratv.cache.base import CacheBackend, CacheConfig

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 60 * 60


@dataclass
class CacheEntry:
    """A single cache entry with usage metadata."""
    value: Any
    last_accessed: float
    access_count: int
    weight: float

    def score(self, now: float) -> float:
        """Eviction score; lower is evicted first.

        Frequently and recently read entries score high, and the weight of
        an old burst of reads decays as the hours since the last read grow.
        """
        hours_since_access = max(0.0, now - self.last_accessed) / SECONDS_PER_HOUR
        return self.access_count / (hours_since_access + 1)


class MemoryCache(CacheBackend):
    """
    Thread-safe in-memory cache bounded by entry count and total weight.

    Features:
    - Weighted eviction by ``access_count / (hours_since_access + 1)``
    - Periodic expiry of entries that have not been read recently
    - Statistics tracking

    The expiry task is owned by whoever constructs the cache:

        async with MemoryCache(config) as cache:
            ...

    or ``await cache.start()`` / ``await cache.destroy()``.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(config)
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._clock = clock
        self._cleanup_task: Optional[asyncio.Task] = None
        self._total_weight: float = 0

    async def __aenter__(self) -> "MemoryCache":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.destroy()

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def total_weight(self) -> float:
        return self._total_weight

    @property
    def is_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    async def start(self) -> None:
        """Start background expiry task."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.debug(
                f"Cache expiry task started (every {self.config.cleanup_interval_seconds}s, "
                f"stale after {self.config.stale_after_seconds}s)"
            )

    async def stop(self) -> None:
        """Stop background expiry task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

    async def destroy(self) -> None:
        """Stop the expiry task and drop every entry."""
        await self.stop()
        await self.clear()

    async def _cleanup_loop(self) -> None:
        """Periodically drop entries that have gone stale."""
        while True:
            await asyncio.sleep(self.config.cleanup_interval_seconds)
            try:
                self.expire_stale()
            except Exception as e:
                logger.error(f"Cache expiry sweep failed: {e}", exc_info=True)

    def expire_stale(self) -> int:
        """Remove entries not read within ``stale_after_seconds``."""
        cutoff = self._clock() - self.config.stale_after_seconds
        with self._lock:
            stale_keys = [
                key for key, entry in self._cache.items()
                if entry.last_accessed < cutoff
            ]
            for key in stale_keys:
                self._remove(key)
            if self.config.enable_stats:
                self.stats.expirations += len(stale_keys)
            self._sync_stats()

        if stale_keys:
            logger.debug(f"Expired {len(stale_keys)} stale cache entries")
        return len(stale_keys)

    def _remove(self, key: str) -> CacheEntry:
        entry = self._cache.pop(key)
        self._total_weight -= entry.weight
        return entry

    def _sync_stats(self) -> None:
        if self.config.enable_stats:
            self.stats.entry_count = len(self._cache)
            self.stats.total_weight = self._total_weight

    def _evict_least_used(self) -> Optional[str]:
        """Evict the lowest-scoring entry; ties go to the oldest insert."""
        now = self._clock()
        victim = None
        min_score = float("inf")
        for key, entry in self._cache.items():
            score = entry.score(now)
            if score < min_score:
                min_score = score
                victim = key

        if victim is None:
            return None

        self._remove(victim)
        if self.config.enable_stats:
            self.stats.evictions += 1
        return victim

    async def get(self, key: str) -> Optional[Any]:
        """Get a value from cache."""
        with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                if self.config.enable_stats:
                    self.stats.misses += 1
                return None

            entry.last_accessed = self._clock()
            entry.access_count += 1

            if self.config.enable_stats:
                self.stats.hits += 1
            return entry.value

    async def set(self, key: str, value: Any, weight: float = 1) -> None:
        """Set a value in cache, evicting until both ceilings hold.

        A value heavier than ``max_total_weight`` empties the cache and is
        stored anyway.
        """
        if value is None:
            raise ValueError("None cannot be cached")

        with self._lock:
            if key in self._cache:
                self._remove(key)

            evicted = []
            while self._cache and (
                len(self._cache) >= self.config.max_entries
                or self._total_weight + weight > self.config.max_total_weight
            ):
                evicted.append(self._evict_least_used())

            self._cache[key] = CacheEntry(
                value=value,
                last_accessed=self._clock(),
                access_count=1,
                weight=weight,
            )
            self._total_weight += weight

            if self.config.enable_stats:
                self.stats.sets += 1
            self._sync_stats()

        if evicted:
            logger.debug(f"Evicted {len(evicted)} cache entries to store {key!r}")

    async def has(self, key: str) -> bool:
        """Check if key exists in cache."""
        with self._lock:
            return key in self._cache

    async def delete(self, key: str) -> bool:
        """Delete a value from cache."""
        with self._lock:
            if key not in self._cache:
                return False
            self._remove(key)
            if self.config.enable_stats:
                self.stats.deletes += 1
            self._sync_stats()
            return True

    async def clear(self) -> int:
        """Clear all cache entries."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._total_weight = 0
            self._sync_stats()
            return count

    async def get_keys(self) -> List[str]:
        """Get all cache keys."""
        with self._lock:
            return list(self._cache.keys())

    async def get_entry_info(self, key: str) -> Optional[Dict[str, Any]]:
        """Get metadata about a cache entry without touching it."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            return {
                "key": key,
                "weight": entry.weight,
                "access_count": entry.access_count,
                "last_accessed": entry.last_accessed,
                "score": entry.score(self._clock()),
            }

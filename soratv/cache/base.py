"""
Cache backend interface and configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union
import asyncio
import hashlib


@dataclass
class CacheConfig:
    """Cache configuration settings."""

    # Hard ceiling on the number of entries
    max_entries: int = 50

    # Hard ceiling on the summed entry weights (roughly bytes)
    max_total_weight: float = 30 * 1024 * 1024

    # How often the expiry sweep runs (seconds)
    cleanup_interval_seconds: float = 120

    # Entries not read for this long are dropped by the sweep (seconds)
    stale_after_seconds: float = 30 * 60

    # Whether to enable cache statistics
    enable_stats: bool = True


@dataclass
class CacheStats:
    """Cache statistics."""
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    expirations: int = 0
    entry_count: int = 0
    total_weight: float = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "deletes": self.deletes,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hit_rate": round(self.hit_rate, 2),
            "entry_count": self.entry_count,
            "total_weight": self.total_weight,
        }


Factory = Callable[[], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class Uncached:
    """Factory result that is handed back to the caller but never stored."""

    value: Any


class CacheBackend(ABC):
    """Abstract cache backend interface."""

    def __init__(self, config: Optional[CacheConfig] = None):
        self.config = config or CacheConfig()
        self.stats = CacheStats()

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get a value from cache, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, weight: float = 1) -> None:
        """Set a value in cache."""
        pass

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check if key exists in cache."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a value from cache."""
        pass

    @abstractmethod
    async def clear(self) -> int:
        """Remove every entry, returning how many were dropped."""
        pass

    async def get_or_set(
        self,
        key: str,
        factory: Factory,
        weight: Union[float, Callable[[Any], float]] = 1,
    ) -> Any:
        """Get value from cache or compute and cache it.

        ``weight`` may be a callable receiving the computed value. A factory
        returning None or an :class:`Uncached` wrapper leaves the cache
        untouched; the wrapped value is returned.
        """
        value = await self.get(key)
        if value is not None:
            return value

        if asyncio.iscoroutinefunction(factory):
            value = await factory()
        else:
            value = factory()
            if asyncio.iscoroutine(value):
                value = await value

        if isinstance(value, Uncached):
            return value.value

        if value is not None:
            entry_weight = weight(value) if callable(weight) else weight
            await self.set(key, value, weight=entry_weight)
        return value

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        return self.stats


def generate_cache_key(*args, **kwargs) -> str:
    """Generate a cache key from arguments.

    ``None`` positional parts are rendered as an empty string so that the
    number of segments stays fixed.
    """
    key_parts = []

    for arg in args:
        if arg is None:
            key_parts.append("")
        elif isinstance(arg, (list, tuple)):
            key_parts.append(",".join(str(x) for x in arg))
        else:
            key_parts.append(str(arg))

    for key, value in sorted(kwargs.items()):
        if value is not None:
            key_parts.append(f"{key}={value}")

    key_string = ":".join(key_parts)

    # Hash long keys
    if len(key_string) > 200:
        return hashlib.sha256(key_string.encode()).hexdigest()[:32]

    return key_string

"""
SoraTV Caching Layer

Bounded in-process cache for:
- The full channel dataset
- Per-country and per-category query results
- Paginated result pages
"""

from soratv.cache.base import CacheBackend, CacheConfig, CacheStats, Uncached, generate_cache_key
from soratv.cache.memory import CacheEntry, MemoryCache
from soratv.cache.aside import CacheAside

__all__ = [
    "CacheBackend",
    "CacheConfig",
    "CacheStats",
    "CacheEntry",
    "MemoryCache",
    "CacheAside",
    "Uncached",
    "generate_cache_key",
]

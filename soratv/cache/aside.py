"""
Cache-aside helper for namespaced read-through caching.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from soratv.cache.base import CacheBackend, generate_cache_key

logger = logging.getLogger(__name__)


class CacheAside:
    """
    Cache-aside pattern helper bound to an explicit cache backend.

    Usage:
        countries = CacheAside(cache, "country")

        async def get_country(name: str, category: str):
            return await countries.get_or_compute(
                (name, category),
                lambda: build_country(name, category),
                weight=lambda result: len(result) * 200,
            )

    With ``single_flight=True`` concurrent misses for the same key share one
    computation instead of each running the factory.
    """

    def __init__(
        self,
        cache: CacheBackend,
        namespace: str,
        single_flight: bool = False,
    ):
        self.cache = cache
        self.namespace = namespace
        self.single_flight = single_flight
        self._in_flight: Dict[str, asyncio.Future] = {}

    def make_key(self, key: Any) -> str:
        """Create namespaced key."""
        if isinstance(key, (list, tuple)):
            return generate_cache_key(self.namespace, *key)
        return generate_cache_key(self.namespace, key)

    async def get(self, key: Any) -> Optional[Any]:
        """Get value from cache."""
        return await self.cache.get(self.make_key(key))

    async def has(self, key: Any) -> bool:
        """Check for a cached value without counting it as a read."""
        return await self.cache.has(self.make_key(key))

    async def set(self, key: Any, value: Any, weight: float = 1) -> None:
        """Set value in cache."""
        await self.cache.set(self.make_key(key), value, weight=weight)

    async def delete(self, key: Any) -> bool:
        """Delete value from cache."""
        return await self.cache.delete(self.make_key(key))

    async def get_or_compute(
        self,
        key: Any,
        factory: Callable[[], Awaitable[Any]],
        weight: Union[float, Callable[[Any], float]] = 1,
    ) -> Any:
        """Get from cache or await ``factory`` and store its result."""
        full_key = self.make_key(key)

        if not self.single_flight:
            return await self.cache.get_or_set(full_key, factory, weight=weight)

        while True:
            cached = await self.cache.get(full_key)
            if cached is not None:
                return cached

            pending = self._in_flight.get(full_key)
            if pending is None:
                return await self._lead(full_key, factory, weight)

            logger.debug(f"Joining in-flight computation for {full_key!r}")
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                # The leader was cancelled, not this caller
                if not pending.cancelled():
                    raise
                logger.debug(f"In-flight computation for {full_key!r} abandoned, retrying")

    async def _lead(
        self,
        full_key: str,
        factory: Callable[[], Awaitable[Any]],
        weight: Union[float, Callable[[Any], float]],
    ) -> Any:
        """Run ``factory`` on behalf of every caller joining ``full_key``."""
        future = asyncio.get_running_loop().create_future()
        self._in_flight[full_key] = future
        try:
            value = await self.cache.get_or_set(full_key, factory, weight=weight)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Retrieve it so an unjoined failure is not reported as lost
            future.exception()
            raise
        else:
            future.set_result(value)
            return value
        finally:
            self._in_flight.pop(full_key, None)

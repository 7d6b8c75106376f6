"""
Unit tests for the namespaced cache-aside helper.
"""

import asyncio

import pytest

from soratv.cache.aside import CacheAside
from soratv.cache.base import Uncached, generate_cache_key


@pytest.mark.unit
class TestCacheKeys:

    def test_key_parts_are_joined(self):
        assert generate_cache_key("country", "Egypt", "news") == "country:Egypt:news"

    def test_none_keeps_segment_position(self):
        assert generate_cache_key("category", None, 0, 50) == "category::0:50"

    def test_long_keys_are_hashed(self):
        key = generate_cache_key("x" * 300)
        assert len(key) == 32

    def test_namespaced_tuple_key(self, cache):
        aside = CacheAside(cache, "paginated")
        assert aside.make_key(("country", "Egypt", "all-channels", 1, 50)) == (
            "paginated:country:Egypt:all-channels:1:50"
        )


@pytest.mark.unit
class TestGetOrCompute:

    @pytest.mark.asyncio
    async def test_concurrent_misses_recompute_by_default(self, cache):
        aside = CacheAside(cache, "ns")
        calls = 0

        async def factory():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return "value"

        results = await asyncio.gather(
            *(aside.get_or_compute("k", factory) for _ in range(3))
        )

        assert results == ["value"] * 3
        assert calls == 3
        assert await aside.get("k") == "value"

    @pytest.mark.asyncio
    async def test_single_flight_shares_one_computation(self, cache):
        aside = CacheAside(cache, "ns", single_flight=True)
        calls = 0

        async def factory():
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return ["value"]

        results = await asyncio.gather(
            *(aside.get_or_compute("k", factory, weight=5) for _ in range(4))
        )

        assert results == [["value"]] * 4
        assert calls == 1
        assert cache.total_weight == 5

    @pytest.mark.asyncio
    async def test_single_flight_propagates_failure_and_recovers(self, cache):
        aside = CacheAside(cache, "ns", single_flight=True)
        attempts = 0

        async def failing():
            nonlocal attempts
            attempts += 1
            await asyncio.sleep(0.01)
            raise RuntimeError("boom")

        results = await asyncio.gather(
            aside.get_or_compute("k", failing),
            aside.get_or_compute("k", failing),
            return_exceptions=True,
        )

        assert all(isinstance(r, RuntimeError) for r in results)
        assert attempts == 1

        async def working():
            return "ok"

        assert await aside.get_or_compute("k", working) == "ok"

    @pytest.mark.asyncio
    async def test_cancelled_leader_does_not_cancel_joined_callers(self, cache):
        aside = CacheAside(cache, "ns", single_flight=True)
        started = asyncio.Event()
        calls = 0

        async def factory():
            nonlocal calls
            calls += 1
            started.set()
            await asyncio.sleep(0.05)
            return [calls]

        leader = asyncio.create_task(aside.get_or_compute("k", factory))
        await started.wait()
        follower = asyncio.create_task(aside.get_or_compute("k", factory))
        await asyncio.sleep(0)

        leader.cancel()

        assert await follower == [2]
        with pytest.raises(asyncio.CancelledError):
            await leader
        assert calls == 2
        assert await aside.get("k") == [2]

    @pytest.mark.asyncio
    async def test_cancelled_follower_leaves_leader_running(self, cache):
        aside = CacheAside(cache, "ns", single_flight=True)
        started = asyncio.Event()

        async def factory():
            started.set()
            await asyncio.sleep(0.05)
            return "value"

        leader = asyncio.create_task(aside.get_or_compute("k", factory))
        await started.wait()
        follower = asyncio.create_task(aside.get_or_compute("k", factory))
        await asyncio.sleep(0)

        follower.cancel()

        with pytest.raises(asyncio.CancelledError):
            await follower
        assert await leader == "value"
        assert await aside.get("k") == "value"

    @pytest.mark.asyncio
    async def test_uncached_result_is_returned_but_not_stored(self, cache):
        aside = CacheAside(cache, "ns")

        async def factory():
            return Uncached([])

        assert await aside.get_or_compute("k", factory) == []
        assert not await aside.has("k")

"""
Unit tests for channel models and dataset loading.
"""

import json

import pytest

from soratv.channels.loader import (
    DATASET_CACHE_KEY,
    DatasetLoader,
    FileDatasetSource,
    HttpDatasetSource,
    open_dataset_source,
    payload_weight,
)
from soratv.channels.models import Channel, ChannelPage
from tests.conftest import CountingSource


@pytest.mark.unit
class TestChannelModel:

    def test_from_dict_maps_known_and_extra_fields(self):
        channel = Channel.from_dict({
            "name": "Nile News",
            "url": "https://example.com/nile.m3u8",
            "countryName": "Egypt",
            "priority": 3,
            "tvgId": "nile.eg",
        })

        assert channel.country_name == "Egypt"
        assert channel.priority == 3
        assert channel.extra == {"tvgId": "nile.eg"}

    def test_to_dict_round_trips_dataset_shape(self):
        data = {"name": "A", "url": "u", "logo": "l", "countryName": "X", "tvgId": "a"}
        assert Channel.from_dict(data).to_dict() == data

    @pytest.mark.parametrize("data", [{"name": "A"}, {"url": "u"}, {"name": 5, "url": "u"}])
    def test_from_dict_requires_name_and_url(self, data):
        with pytest.raises(ValueError):
            Channel.from_dict(data)

    def test_non_numeric_priority_sorts_last(self):
        channel = Channel.from_dict({"name": "A", "url": "u", "priority": "high"})
        assert channel.priority is None
        assert channel.sort_priority == float("inf")

    def test_page_to_dict_omits_next_page_on_last_page(self):
        page = ChannelPage(channels=[], has_more=False, total=0)
        assert page.to_dict() == {"channels": [], "hasMore": False, "total": 0}


@pytest.mark.unit
class TestDatasetLoader:

    @pytest.mark.asyncio
    async def test_load_all_parses_and_caches(self, cache, source, sample_dataset):
        loader = DatasetLoader(cache, source)

        dataset = await loader.load_all()

        assert set(dataset) == set(sample_dataset) | {"United States of America"}
        assert all(isinstance(c, Channel) for c in dataset["Egypt"])
        assert await cache.has(DATASET_CACHE_KEY)
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_second_load_uses_cache(self, cache, source):
        loader = DatasetLoader(cache, source)

        first = await loader.load_all()
        second = await loader.load_all()

        assert first is second
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_us_alias_points_at_same_channels(self, cache, source):
        dataset = await DatasetLoader(cache, source).load_all()

        assert dataset["United States of America"] is dataset["United States"]

    @pytest.mark.asyncio
    async def test_weight_is_serialized_payload_length(self, cache, source, sample_dataset):
        await DatasetLoader(cache, source).load_all()

        aliased = dict(sample_dataset)
        aliased["United States of America"] = aliased["United States"]
        info = await cache.get_entry_info(DATASET_CACHE_KEY)
        assert info["weight"] == payload_weight(aliased)
        assert info["weight"] == len(
            json.dumps(aliased, ensure_ascii=False, separators=(",", ":"))
        )

    @pytest.mark.asyncio
    async def test_malformed_entries_are_skipped(self, cache):
        source = CountingSource({
            "Egypt": [
                {"name": "Good", "url": "https://example.com/good"},
                {"name": "No URL"},
                "not an object",
            ],
            "Broken": {"not": "a list"},
        })

        dataset = await DatasetLoader(cache, source).load_all()

        assert [c.name for c in dataset["Egypt"]] == ["Good"]
        assert dataset["Broken"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "source",
        [
            CountingSource(status_code=500, text="server error"),
            CountingSource(status_code=404, text="missing"),
            CountingSource(text="{not json"),
            CountingSource(["a", "list"]),
        ],
    )
    async def test_failures_return_empty_and_are_not_cached(self, cache, source):
        loader = DatasetLoader(cache, source)

        assert await loader.load_all() == {}
        assert not await cache.has(DATASET_CACHE_KEY)

        assert await loader.load_all() == {}
        assert source.calls == 2
        assert loader.failed_loads == 2
        assert await loader.load() is None

    @pytest.mark.asyncio
    async def test_transport_error_returns_empty(self, cache):
        import httpx

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source = HttpDatasetSource(
            "https://cdn.example.com/channels.json",
            transport=httpx.MockTransport(handler),
        )

        assert await DatasetLoader(cache, source).load_all() == {}

    @pytest.mark.asyncio
    async def test_file_source(self, cache, dataset_file):
        dataset = await DatasetLoader(cache, FileDatasetSource(dataset_file)).load_all()

        assert "Morocco" in dataset

    @pytest.mark.asyncio
    async def test_missing_file_returns_empty(self, cache, tmp_path):
        source = FileDatasetSource(tmp_path / "missing.json")

        assert await DatasetLoader(cache, source).load_all() == {}

    @pytest.mark.asyncio
    async def test_custom_aliases(self, cache, source):
        loader = DatasetLoader(cache, source, aliases={"Egypt": "Misr"})

        dataset = await loader.load_all()

        assert dataset["Misr"] is dataset["Egypt"]
        assert "United States of America" not in dataset
        assert loader.alias_countries == frozenset({"Misr"})


@pytest.mark.unit
class TestOpenDatasetSource:

    def test_http_url(self):
        source = open_dataset_source("https://cdn.example.com/channels.json", timeout=5)
        assert isinstance(source, HttpDatasetSource)
        assert source.timeout == 5

    def test_file_url(self, tmp_path):
        path = tmp_path / "channels.json"
        source = open_dataset_source(path.as_uri())
        assert isinstance(source, FileDatasetSource)
        assert source.path == path

    def test_plain_path(self):
        source = open_dataset_source("data/channels.json")
        assert isinstance(source, FileDatasetSource)

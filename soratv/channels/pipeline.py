"""
Channel query pipeline.

Every query runs dataset load -> URL normalization -> category filter ->
ordering, and its result is cached under a key built from the query scope
and parameters. Paginated queries wrap the full result and cache each page
separately.

A result computed while the dataset could not be loaded is returned but
not cached, so the empty answer is recomputed on the next call.
"""

import dataclasses
import logging
import random
from typing import Iterable, List, Optional, Union

from soratv.cache.aside import CacheAside
from soratv.cache.base import CacheBackend, Uncached
from soratv.channels.categories import (
    ALL_CHANNELS,
    RANDOM_CHANNEL,
    CategoryClassifier,
    is_passthrough,
)
from soratv.channels.loader import DatasetLoader
from soratv.channels.models import Channel, ChannelPage
from soratv.channels.urls import normalize_youtube_url

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


@dataclasses.dataclass
class PipelineSettings:
    """Sampling sizes and cache weights used by the query pipeline."""
    country_sample_size: int = 20
    category_sample_size: int = 40
    country_weight_per_channel: float = 200
    category_weight_per_channel: float = 150
    page_weight_per_channel: float = 100
    single_flight: bool = False


def smart_sort_key(channel: Channel):
    """Ascending priority (absent last), then name."""
    return (channel.sort_priority, channel.name.casefold(), channel.name)


def check_page_args(page: int, page_size: int) -> None:
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")


def paginate(channels: List[Channel], page: int, page_size: int) -> ChannelPage:
    """Slice one page out of a full result."""
    check_page_args(page, page_size)

    start = page * page_size
    end = start + page_size
    has_more = end < len(channels)
    return ChannelPage(
        channels=list(channels[start:end]),
        has_more=has_more,
        total=len(channels),
        next_page=page + 1 if has_more else None,
    )


class ChannelQueryService:
    """Country and cross-country channel queries over a shared cache."""

    def __init__(
        self,
        cache: CacheBackend,
        loader: DatasetLoader,
        classifier: Optional[CategoryClassifier] = None,
        settings: Optional[PipelineSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.cache = cache
        self.loader = loader
        self.classifier = classifier or CategoryClassifier()
        self.settings = settings or PipelineSettings()
        self.rng = rng or random.Random()

        single_flight = self.settings.single_flight
        self._by_country = CacheAside(cache, "country", single_flight=single_flight)
        self._by_category = CacheAside(cache, "category", single_flight=single_flight)
        self._pages = CacheAside(cache, "paginated", single_flight=single_flight)

    @staticmethod
    def country_key(country: str, category: Optional[str]) -> tuple:
        # None and "all-channels" produce the same result, so they share a key
        return (country, category or ALL_CHANNELS)

    async def is_country_cached(self, country: str, category: Optional[str] = None) -> bool:
        return await self._by_country.has(self.country_key(country, category))

    async def list_countries(self) -> List[str]:
        dataset = await self.loader.load_all()
        return sorted(dataset)

    def _prepare(self, channels: Iterable[Channel], category: Optional[str]) -> List[Channel]:
        """Normalize URLs and filter; canonical channels are never mutated."""
        prepared = []
        for channel in channels:
            url = normalize_youtube_url(channel.url)
            if url != channel.url:
                channel = dataclasses.replace(channel, url=url)
            if self.classifier.matches(channel, category):
                prepared.append(channel)
        return prepared

    def _order(self, channels: List[Channel], category: Optional[str], sample_size: int) -> List[Channel]:
        if category == RANDOM_CHANNEL:
            return self.rng.sample(channels, min(sample_size, len(channels)))
        channels.sort(key=smart_sort_key)
        return channels

    async def get_channels_by_country(
        self, country: str, category: Optional[str] = None
    ) -> List[Channel]:
        """Channels of one country matching ``category``."""

        async def compute() -> Union[List[Channel], Uncached]:
            dataset = await self.loader.load()
            if dataset is None:
                return Uncached([])
            filtered = self._prepare(dataset.get(country, []), category)
            return self._order(filtered, category, self.settings.country_sample_size)

        return await self._by_country.get_or_compute(
            self.country_key(country, category),
            compute,
            weight=lambda result: len(result) * self.settings.country_weight_per_channel,
        )

    async def get_channels_by_category(self, category: Optional[str]) -> List[Channel]:
        """Channels of every country matching ``category``, tagged with their country.

        Passthrough categories have no cross-country listing and return an
        empty list.
        """
        if is_passthrough(category):
            return []

        async def compute() -> Union[List[Channel], Uncached]:
            dataset = await self.loader.load()
            if dataset is None:
                return Uncached([])
            aliases = self.loader.alias_countries
            tagged = (
                dataclasses.replace(channel, country_name=country)
                for country, channels in dataset.items()
                if country not in aliases
                for channel in channels
            )
            filtered = self._prepare(tagged, category)
            return self._order(filtered, category, self.settings.category_sample_size)

        return await self._by_category.get_or_compute(
            category,
            compute,
            weight=lambda result: len(result) * self.settings.category_weight_per_channel,
        )

    async def get_channels_paginated(
        self,
        country: str,
        category: Optional[str] = None,
        page: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ChannelPage:
        """One page of :meth:`get_channels_by_country`."""
        check_page_args(page, page_size)

        async def compute() -> Union[ChannelPage, Uncached]:
            failed_loads = self.loader.failed_loads
            channels = await self.get_channels_by_country(country, category)
            return self._page_of(channels, page, page_size, failed_loads)

        return await self._pages.get_or_compute(
            ("country", *self.country_key(country, category), page, page_size),
            compute,
            weight=self._page_weight,
        )

    async def get_category_channels_paginated(
        self,
        category: Optional[str],
        page: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ChannelPage:
        """One page of :meth:`get_channels_by_category`."""
        check_page_args(page, page_size)

        async def compute() -> Union[ChannelPage, Uncached]:
            failed_loads = self.loader.failed_loads
            channels = await self.get_channels_by_category(category)
            return self._page_of(channels, page, page_size, failed_loads)

        return await self._pages.get_or_compute(
            ("category", category, page, page_size),
            compute,
            weight=self._page_weight,
        )

    def _page_of(
        self, channels: List[Channel], page: int, page_size: int, failed_loads: int
    ) -> Union[ChannelPage, Uncached]:
        """Slice one page; it is not cached if a dataset load failed meanwhile."""
        result = paginate(channels, page, page_size)
        if self.loader.failed_loads != failed_loads:
            return Uncached(result)
        return result

    def _page_weight(self, result: ChannelPage) -> float:
        return len(result.channels) * self.settings.page_weight_per_channel

    async def clear_cache(self) -> int:
        """Drop every cached dataset, result and page."""
        count = await self.cache.clear()
        logger.info(f"Channels cache cleared ({count} entries)")
        return count

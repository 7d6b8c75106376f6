"""
Catalog wiring: builds the cache, loader, query service and user library
from configuration and owns the cache lifecycle.
"""

import asyncio
import logging
from typing import Optional

from soratv.cache.memory import MemoryCache
from soratv.channels.categories import CategoryClassifier
from soratv.channels.loader import DatasetLoader, DatasetSource, open_dataset_source
from soratv.channels.pipeline import ChannelQueryService
from soratv.channels.preload import schedule_preload
from soratv.config import SoraTVConfig
from soratv.storage.library import UserLibrary
from soratv.storage.store import FileStore, KeyValueStore

logger = logging.getLogger(__name__)


class ChannelCatalog:
    """
    One cache per process, shared by the loader and the query service.

    Usage:
        async with ChannelCatalog(config) as catalog:
            page = await catalog.channels.get_channels_paginated("Egypt", "news")
    """

    def __init__(
        self,
        config: SoraTVConfig,
        source: Optional[DatasetSource] = None,
        store: Optional[KeyValueStore] = None,
        classifier: Optional[CategoryClassifier] = None,
    ):
        self.config = config
        self.cache = MemoryCache(config.cache.to_cache_config())
        self.loader = DatasetLoader(
            self.cache,
            source or open_dataset_source(
                config.dataset.source, timeout=config.dataset.timeout_seconds
            ),
            aliases=config.dataset.aliases,
        )
        self.channels = ChannelQueryService(
            self.cache,
            self.loader,
            classifier=classifier,
            settings=config.pipeline.to_settings(),
        )
        if store is None and config.storage.directory:
            store = FileStore(config.storage.directory)
        self.library = UserLibrary(
            store,
            self.loader,
            history_key=config.storage.history_key,
            favorites_key=config.storage.favorites_key,
        )
        self.preload_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        await self.cache.start()
        logger.info(f"Channel catalog started (source: {self.loader.source!r})")
        if self.config.preload.enabled:
            self.preload_task = schedule_preload(self.channels, self.config.preload.countries)

    async def stop(self) -> None:
        if self.preload_task is not None and not self.preload_task.done():
            self.preload_task.cancel()
            try:
                await self.preload_task
            except asyncio.CancelledError:
                pass
        self.preload_task = None
        await self.cache.destroy()
        logger.info("Channel catalog stopped")

    async def __aenter__(self) -> "ChannelCatalog":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

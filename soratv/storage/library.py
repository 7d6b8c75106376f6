"""
User history and favorites, read from the client's key-value store.
"""

import dataclasses
import json
import logging
from typing import List, Optional

from soratv.channels.loader import DatasetLoader
from soratv.channels.models import Channel, parse_channel_list
from soratv.channels.urls import normalize_youtube_url
from soratv.storage.store import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "sora_tv_history"
FAVORITES_KEY = "favorites"


def favorite_key(country: str, channel_name: str) -> str:
    return f"{country}:{channel_name}"


class UserLibrary:
    """
    Read access to a user's watch history and favorite channels.

    ``store`` is None where no client storage exists; every read then
    returns an empty list.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore],
        loader: DatasetLoader,
        history_key: str = HISTORY_KEY,
        favorites_key: str = FAVORITES_KEY,
    ):
        self.store = store
        self.loader = loader
        self.history_key = history_key
        self.favorites_key = favorites_key

    async def get_history(self) -> List[Channel]:
        """Channels in the stored history; a corrupted record is deleted."""
        if self.store is None:
            return []

        raw = self.store.get(self.history_key)
        if not raw:
            return []

        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError(f"expected a JSON array, got {type(entries).__name__}")
        except ValueError as e:
            logger.error(f"Failed to parse history: {e}")
            self.store.remove(self.history_key)
            return []

        return parse_channel_list("history", entries)

    async def get_favorites(self) -> List[Channel]:
        """Favorite channels materialized from the dataset, sorted by name."""
        if self.store is None:
            return []

        dataset = await self.loader.load_all()

        raw = self.store.get(self.favorites_key)
        if not raw:
            return []

        try:
            keys = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to parse favorites: {e}")
            return []

        if not isinstance(keys, list):
            logger.error("Failed to parse favorites: expected a JSON array")
            return []

        wanted = {key for key in keys if isinstance(key, str)}
        if not wanted:
            return []

        aliases = self.loader.alias_countries
        favorites = [
            dataclasses.replace(
                channel,
                url=normalize_youtube_url(channel.url),
                country_name=country,
            )
            for country, channels in dataset.items()
            if country not in aliases
            for channel in channels
            if favorite_key(country, channel.name) in wanted
        ]
        favorites.sort(key=lambda channel: (channel.name.casefold(), channel.name))
        return favorites

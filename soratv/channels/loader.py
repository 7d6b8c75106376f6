"""
Channel dataset loading.

Fetches the country -> channel list document once, normalizes it and keeps
it in the bounded cache under a fixed key until it is evicted or expires.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx

from soratv.cache.base import CacheBackend
from soratv.channels.models import Dataset, parse_channel_list

logger = logging.getLogger(__name__)

DATASET_CACHE_KEY = "all-channels"

US_ALIAS = "United States of America"
DEFAULT_ALIASES: Dict[str, str] = {"United States": US_ALIAS}


class DatasetFetchError(Exception):
    """Raised by a dataset source when the document cannot be retrieved."""


class DatasetSource(ABC):
    """Where the raw channel document comes from."""

    @abstractmethod
    async def fetch_text(self) -> str:
        """Return the raw JSON document, raising DatasetFetchError on failure."""
        pass


class HttpDatasetSource(DatasetSource):
    """Fetches the dataset document over HTTP."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client
        self._transport = transport

    async def fetch_text(self) -> str:
        try:
            if self._client is not None:
                response = await self._client.get(self.url)
                response.raise_for_status()
                return response.text

            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            raise DatasetFetchError(
                f"Failed to fetch channels: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DatasetFetchError(f"Failed to fetch channels: {e}") from e

    def __repr__(self) -> str:
        return f"HttpDatasetSource({self.url!r})"


class FileDatasetSource(DatasetSource):
    """Reads the dataset document from a local JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def fetch_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DatasetFetchError(f"Failed to read {self.path}: {e}") from e

    def __repr__(self) -> str:
        return f"FileDatasetSource({str(self.path)!r})"


def open_dataset_source(location: str, timeout: float = 30.0) -> DatasetSource:
    """Pick a dataset source for an http(s) URL, a file:// URL or a path."""
    scheme = urlsplit(location).scheme.lower()
    if scheme in ("http", "https"):
        return HttpDatasetSource(location, timeout=timeout)
    if scheme == "file":
        return FileDatasetSource(url2pathname(urlsplit(location).path))
    return FileDatasetSource(location)


def apply_aliases(data: Dict[str, Any], aliases: Mapping[str, str]) -> None:
    """Point each alias key at its source country's entry, in place."""
    for source, alias in aliases.items():
        if source in data:
            data[alias] = data[source]


def payload_weight(data: Any) -> int:
    """Size weight of a dataset: the length of its compact JSON form."""
    return len(json.dumps(data, ensure_ascii=False, separators=(",", ":")))


class DatasetLoader:
    """Loads and caches the full channel dataset."""

    def __init__(
        self,
        cache: CacheBackend,
        source: DatasetSource,
        aliases: Optional[Mapping[str, str]] = None,
    ):
        self.cache = cache
        self.source = source
        self.aliases = dict(DEFAULT_ALIASES if aliases is None else aliases)
        self.failed_loads = 0

    @property
    def alias_countries(self) -> frozenset:
        return frozenset(self.aliases.values())

    async def load_all(self) -> Dataset:
        """Return the dataset, or an empty mapping if it cannot be loaded."""
        dataset = await self.load()
        return {} if dataset is None else dataset

    async def load(self) -> Optional[Dataset]:
        """Return the dataset, fetching it only on a cache miss.

        Never raises: any fetch or parse failure is logged, counted in
        ``failed_loads`` and returns None. Nothing is cached on failure.
        """
        cached = await self.cache.get(DATASET_CACHE_KEY)
        if cached is not None:
            return cached

        try:
            text = await self.source.fetch_text()
            raw = json.loads(text)
        except DatasetFetchError as e:
            logger.error(f"Error loading channel dataset from {self.source!r}: {e}")
            self.failed_loads += 1
            return None
        except ValueError as e:
            logger.error(f"Channel dataset from {self.source!r} is not valid JSON: {e}")
            self.failed_loads += 1
            return None

        if not isinstance(raw, dict):
            logger.error(
                f"Channel dataset from {self.source!r} must be an object, "
                f"got {type(raw).__name__}"
            )
            self.failed_loads += 1
            return None

        apply_aliases(raw, self.aliases)
        weight = payload_weight(raw)

        dataset: Dataset = {}
        for country, entries in raw.items():
            dataset[country] = parse_channel_list(country, entries)
        # Aliases share the parsed list with their source country
        for source, alias in self.aliases.items():
            if source in dataset:
                dataset[alias] = dataset[source]

        await self.cache.set(DATASET_CACHE_KEY, dataset, weight=weight)
        logger.info(
            f"Loaded channel dataset: {len(dataset)} countries, "
            f"{sum(len(v) for k, v in dataset.items() if k not in self.alias_countries)} channels"
        )
        return dataset

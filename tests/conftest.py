"""
SoraTV Test Configuration

Shared fixtures and configuration for all tests.
"""

import json
import random
from typing import Any, Dict, List

import httpx
import pytest

from soratv.cache.base import CacheConfig
from soratv.cache.memory import MemoryCache
from soratv.channels.loader import DatasetLoader, HttpDatasetSource
from soratv.channels.pipeline import ChannelQueryService

DATASET_URL = "https://cdn.example.com/data/channels.json"


# ============ Helpers ============


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingSource(HttpDatasetSource):
    """HTTP dataset source backed by httpx.MockTransport that counts fetches."""

    def __init__(self, payload: Any = None, status_code: int = 200, text: str = None):
        self.calls = 0
        self.payload = payload
        self.status_code = status_code
        self.text = text

        def handler(request: httpx.Request) -> httpx.Response:
            self.calls += 1
            if self.text is not None:
                return httpx.Response(self.status_code, text=self.text)
            return httpx.Response(self.status_code, json=self.payload)

        super().__init__(DATASET_URL, transport=httpx.MockTransport(handler))


def make_channels(count: int, prefix: str = "Channel") -> List[Dict[str, Any]]:
    return [
        {"name": f"{prefix} {index:03d}", "url": f"https://example.com/{prefix.lower()}/{index}.m3u8"}
        for index in range(count)
    ]


# ============ Data Fixtures ============


@pytest.fixture
def sample_dataset() -> Dict[str, List[Dict[str, Any]]]:
    """A small dataset covering categories, priorities and YouTube URL shapes."""
    return {
        "United States": [
            {
                "name": "CNN International",
                "url": "https://www.youtube.com/watch?v=abc123",
                "category": "News",
                "priority": 2,
            },
            {"name": "ABC News Live", "url": "https://youtu.be/xyz789", "priority": 1},
            {
                "name": "Bloomberg TV",
                "url": "https://example.com/bloomberg.m3u8",
                "category": "business",
            },
            {"name": "Comedy Central", "url": "https://example.com/cc.m3u8"},
        ],
        "Egypt": [
            {
                "name": "Rotana Music",
                "url": "https://www.youtube.com/live/rot111",
                "logo": "https://example.com/rotana.png",
                "language": "ar",
            },
            {
                "name": "Al Hayah",
                "url": "https://example.com/hayah.m3u8",
                "category": "general",
                "priority": 1,
            },
            {"name": "Nile News", "url": "https://example.com/nile.m3u8", "category": "news"},
        ],
        "Morocco": [
            {"name": "2M Maroc", "url": "https://example.com/2m.m3u8", "tvgId": "2M.ma"},
            {
                "name": "Medi1 TV",
                "url": "https://www.youtube.com/embed/med1",
                "category": "News",
            },
        ],
    }


# ============ Cache / Pipeline Fixtures ============


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    """A cache with the production ceilings and a fake clock (not started)."""
    return MemoryCache(CacheConfig(), clock=clock)


@pytest.fixture
def source(sample_dataset) -> CountingSource:
    return CountingSource(sample_dataset)


@pytest.fixture
def loader(cache: MemoryCache, source: CountingSource) -> DatasetLoader:
    return DatasetLoader(cache, source)


@pytest.fixture
def service(cache: MemoryCache, loader: DatasetLoader) -> ChannelQueryService:
    return ChannelQueryService(cache, loader, rng=random.Random(42))


@pytest.fixture
def dataset_file(tmp_path, sample_dataset):
    path = tmp_path / "channels.json"
    path.write_text(json.dumps(sample_dataset), encoding="utf-8")
    return path


# ============ Pytest Configuration ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")

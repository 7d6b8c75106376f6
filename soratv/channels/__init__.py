"""Channel catalog: data model, classification, loading and queries"""

from soratv.channels.categories import CATEGORY_KEYWORDS, CategoryClassifier, is_passthrough
from soratv.channels.loader import (
    DatasetLoader,
    DatasetSource,
    FileDatasetSource,
    HttpDatasetSource,
    open_dataset_source,
)
from soratv.channels.models import Channel, ChannelPage, Dataset
from soratv.channels.pipeline import ChannelQueryService, PipelineSettings
from soratv.channels.preload import preload_priority_countries, schedule_preload
from soratv.channels.urls import normalize_youtube_url

__all__ = [
    "CATEGORY_KEYWORDS",
    "CategoryClassifier",
    "Channel",
    "ChannelPage",
    "ChannelQueryService",
    "Dataset",
    "DatasetLoader",
    "DatasetSource",
    "FileDatasetSource",
    "HttpDatasetSource",
    "PipelineSettings",
    "is_passthrough",
    "normalize_youtube_url",
    "open_dataset_source",
    "preload_priority_countries",
    "schedule_preload",
]

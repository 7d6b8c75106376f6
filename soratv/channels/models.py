"""
Channel catalog data model.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Known dataset keys mapped to Channel attribute names
_FIELD_MAP = {
    "name": "name",
    "url": "url",
    "logo": "logo",
    "category": "category",
    "countryName": "country_name",
    "priority": "priority",
    "language": "language",
    "platform": "platform",
    "source": "source",
    "description": "description",
}


@dataclass(frozen=True)
class Channel:
    """A streaming channel entry from the catalog dataset."""

    name: str
    url: str
    logo: Optional[str] = None
    category: Optional[str] = None
    country_name: Optional[str] = None
    priority: Optional[float] = None
    language: Optional[Any] = None
    platform: Optional[str] = None
    source: Optional[str] = None
    description: Optional[str] = None

    # Any dataset keys without a dedicated field
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Channel":
        """Build a Channel from a dataset object.

        Raises ValueError when ``name`` or ``url`` is missing or not a string.
        """
        name = data.get("name")
        url = data.get("url")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ValueError("channel entry requires string 'name' and 'url'")

        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            attr = _FIELD_MAP.get(key)
            if attr is None:
                extra[key] = value
            else:
                kwargs[attr] = value

        priority = kwargs.get("priority")
        if priority is not None and (
            isinstance(priority, bool) or not isinstance(priority, (int, float))
        ):
            # Non-numeric priorities sort as if absent
            kwargs["priority"] = None

        return cls(extra=extra, **kwargs)

    @property
    def sort_priority(self) -> float:
        return self.priority if self.priority is not None else float("inf")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dataset's JSON shape, omitting unset fields."""
        data: Dict[str, Any] = dict(self.extra)
        for key, attr in _FIELD_MAP.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class ChannelPage:
    """One page of a channel query result."""

    channels: List[Channel]
    has_more: bool
    total: int
    next_page: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "channels": [channel.to_dict() for channel in self.channels],
            "hasMore": self.has_more,
            "total": self.total,
        }
        if self.next_page is not None:
            data["nextPage"] = self.next_page
        return data


Dataset = Dict[str, List[Channel]]


def parse_channel_list(country: str, entries: Any) -> List[Channel]:
    """Parse one country's raw channel array, skipping malformed entries."""
    if not isinstance(entries, list):
        logger.debug(f"Ignoring non-list channel data for {country!r}")
        return []

    channels = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.debug(f"Skipping non-object channel #{index} in {country!r}")
            continue
        try:
            channels.append(Channel.from_dict(entry))
        except ValueError as e:
            logger.debug(f"Skipping channel #{index} in {country!r}: {e}")
    return channels

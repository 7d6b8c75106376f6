"""
Startup warm-up of the channel cache for the most visited countries.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Set

from soratv.channels.pipeline import ChannelQueryService

logger = logging.getLogger(__name__)

PRIORITY_COUNTRIES: List[str] = [
    "United States", "United Kingdom", "Saudi Arabia",
    "United Arab Emirates", "Egypt", "Germany", "France",
    "Canada", "Australia", "India", "Italy", "Spain",
    "Brazil", "Japan", "South Korea", "Turkey", "Morocco",
]

# Keeps fire-and-forget tasks referenced until they finish
_background_tasks: Set[asyncio.Task] = set()


async def _preload_country(service: ChannelQueryService, country: str) -> bool:
    try:
        if await service.is_country_cached(country):
            return True
        await service.get_channels_by_country(country, None)
    except Exception as e:
        logger.warning(f"Failed to preload {country}: {e}")
        return False

    if await service.is_country_cached(country):
        logger.debug(f"Preloaded: {country}")
        return True
    logger.warning(f"Failed to preload {country}: channel dataset unavailable")
    return False


async def preload_priority_countries(
    service: ChannelQueryService,
    countries: Optional[Iterable[str]] = None,
) -> int:
    """
    Warm the unfiltered query of each priority country.

    Countries are loaded concurrently and fail independently.

    Returns:
        Number of countries that are now cached
    """
    country_list = list(PRIORITY_COUNTRIES if countries is None else countries)
    results = await asyncio.gather(
        *(_preload_country(service, country) for country in country_list)
    )
    successful = sum(1 for ok in results if ok)
    logger.info(f"Preloading completed: {successful}/{len(country_list)} countries")
    return successful


def schedule_preload(
    service: ChannelQueryService,
    countries: Optional[Iterable[str]] = None,
) -> asyncio.Task:
    """Start :func:`preload_priority_countries` without waiting for it."""
    task = asyncio.create_task(
        preload_priority_countries(service, countries), name="soratv-preload"
    )
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task

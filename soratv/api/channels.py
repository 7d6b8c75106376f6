"""Channel catalog API endpoints"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from soratv.api.dependencies import get_catalog, get_channel_service
from soratv.catalog import ChannelCatalog
from soratv.channels.pipeline import ChannelQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/channels", tags=["Channels"])


def get_page_size(
    page_size: Optional[int] = Query(None, ge=1, le=500),
    catalog: ChannelCatalog = Depends(get_catalog),
) -> int:
    """Requested page size, or the configured default."""
    return page_size or catalog.config.pipeline.default_page_size


@router.get("/countries")
async def list_countries(
    service: ChannelQueryService = Depends(get_channel_service),
) -> List[str]:
    """Country names present in the dataset."""
    return await service.list_countries()


@router.get("/countries/{country}")
async def get_country_channels(
    country: str,
    category: Optional[str] = None,
    page: int = Query(0, ge=0),
    page_size: int = Depends(get_page_size),
    service: ChannelQueryService = Depends(get_channel_service),
) -> Dict[str, Any]:
    """One page of a country's channels, optionally filtered by category."""
    result = await service.get_channels_paginated(country, category, page, page_size)
    return result.to_dict()


@router.get("/categories/{category}")
async def get_category_channels(
    category: str,
    page: int = Query(0, ge=0),
    page_size: int = Depends(get_page_size),
    service: ChannelQueryService = Depends(get_channel_service),
) -> Dict[str, Any]:
    """One page of channels from every country matching a category."""
    result = await service.get_category_channels_paginated(category, page, page_size)
    return result.to_dict()

"""Cache inspection endpoints"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from soratv.api.dependencies import get_catalog
from soratv.catalog import ChannelCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cache", tags=["Cache"])


@router.get("/stats")
async def get_cache_stats(catalog: ChannelCatalog = Depends(get_catalog)) -> Dict[str, Any]:
    stats = catalog.cache.get_stats().to_dict()
    stats["max_entries"] = catalog.cache.config.max_entries
    stats["max_total_weight"] = catalog.cache.config.max_total_weight
    return stats


@router.delete("")
async def clear_cache(catalog: ChannelCatalog = Depends(get_catalog)) -> Dict[str, Any]:
    cleared = await catalog.channels.clear_cache()
    return {"cleared": cleared}

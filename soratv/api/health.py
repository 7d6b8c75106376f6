"""Health check API endpoint for SoraTV"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request

from soratv import __version__

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(request: Request) -> dict[str, Any]:
    """Report whether the catalog and its cache expiry task are running."""
    catalog = getattr(request.app.state, "catalog", None)
    cache_running = catalog is not None and catalog.cache.is_running
    return {
        "status": "healthy" if cache_running else "degraded",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "cache": {
            "running": cache_running,
            "entries": len(catalog.cache) if catalog is not None else 0,
        },
    }

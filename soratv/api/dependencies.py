"""FastAPI dependencies resolving the running catalog"""

from fastapi import HTTPException, Request

from soratv.catalog import ChannelCatalog
from soratv.channels.pipeline import ChannelQueryService


def get_catalog(request: Request) -> ChannelCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(status_code=503, detail="Channel catalog is not running")
    return catalog


def get_channel_service(request: Request) -> ChannelQueryService:
    return get_catalog(request).channels

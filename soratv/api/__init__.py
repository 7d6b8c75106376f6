"""API routes for SoraTV"""

from fastapi import APIRouter

from .cache import router as cache_router
from .channels import router as channels_router
from .health import router as health_router

# Create the main API router
api_router = APIRouter(prefix="/api")

api_router.include_router(channels_router)
api_router.include_router(cache_router)

__all__ = ["api_router", "health_router"]

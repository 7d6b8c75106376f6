"""
SoraTV Main Application

FastAPI application serving the channel catalog.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from soratv import __version__
from soratv.catalog import ChannelCatalog
from soratv.channels.loader import DatasetSource
from soratv.config import SoraTVConfig, load_config
from soratv.storage.store import KeyValueStore

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[SoraTVConfig] = None,
    source: Optional[DatasetSource] = None,
    store: Optional[KeyValueStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The catalog (and with it the cache and its expiry task) lives exactly as
    long as the application lifespan.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(f"Starting SoraTV v{__version__}")
        app_config = config or load_config()

        async with ChannelCatalog(app_config, source=source, store=store) as catalog:
            app.state.catalog = catalog
            logger.info("SoraTV started successfully")
            try:
                yield
            finally:
                logger.info("Shutting down SoraTV")
                app.state.catalog = None

        logger.info("SoraTV shutdown complete")

    app = FastAPI(
        title="SoraTV",
        description="Channel catalog with a bounded in-process query cache",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.catalog = None

    from soratv.api import api_router, health_router
    app.include_router(api_router)
    app.include_router(health_router)

    return app


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    from soratv.utils.logging_setup import setup_logging

    config = load_config()
    setup_logging(
        log_level=config.logging.level,
        log_file=config.logging.file,
        log_to_console=config.logging.to_console,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
        log_format=config.logging.format,
    )

    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()

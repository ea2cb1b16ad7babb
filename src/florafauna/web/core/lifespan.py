"""Application lifespan management for startup and shutdown events."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from florafauna.system.structlog_configurator import configure_structlog
from florafauna.web.core.container import Container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup; stop builds and close the HTTP client on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control back to the application for normal operation.
    """
    container: Container = app.container  # type: ignore[attr-defined]

    config = container.config()
    configure_structlog(config)

    store = container.species_store()
    logger.info("Serving %d species", len(store))

    try:
        yield
    finally:
        logger.info("Shutting down application services...")
        await container.archive_job_manager().shutdown()
        await container.http_client().aclose()

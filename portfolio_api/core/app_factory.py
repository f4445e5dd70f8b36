"""Application factory for the portfolio API.

Centralizes app construction (lifespan, middleware, handlers, routers) so
tests can build isolated app instances.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from portfolio_api.api.routes import contact_router, github_router, health_router
from portfolio_api.core.config import settings
from portfolio_api.core.exception_handlers import setup_exception_handlers
from portfolio_api.core.logging import configure_logging
from portfolio_api.core.middleware import request_id_middleware
from portfolio_api.core.rate_limit import run_periodic_cleanup

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Run the rate limit store sweep for the lifetime of the app."""
    interval = settings.rate_limit.cleanup_interval_seconds
    cleanup_task = asyncio.create_task(run_periodic_cleanup(interval))
    logger.info("rate_limit.cleanup_scheduled", extra={"interval_s": interval})
    try:
        yield
    finally:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Portfolio API",
        description=(
            "JSON API behind the portfolio site: contact form and GitHub activity. "
            "All routes answer with a standard success/error envelope and are rate "
            "limited per client IP."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(contact_router, prefix="/api")
    app.include_router(github_router, prefix="/api")
    app.include_router(health_router)

    return app

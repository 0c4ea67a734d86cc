"""FastAPI application factory for the pollqueue broker."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pollqueue.api.routes.queues import router as queues_router
from pollqueue.core.config.models import Config
from pollqueue.core.queue.registry import QueueRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle."""
    logger.info("Queue broker started")

    yield

    # Shutdown: release long-polling consumers so their requests finish with 204
    registry: QueueRegistry = app.state.registry
    registry.close()
    logger.info(f"Queue broker stopped ({len(registry.get_stats())} queue(s) in use)")


def create_app(
    config: Config | None = None,
    registry: QueueRegistry | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration (defaults to Config())
        registry: Queue registry to serve; a fresh one is created if omitted

    Returns:
        Configured FastAPI application instance
    """
    app_config = config or Config()

    app = FastAPI(
        title="pollqueue",
        description="In-memory multi-queue message broker with long polling",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.config = app_config
    app.state.registry = registry if registry is not None else QueueRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(queues_router)

    return app

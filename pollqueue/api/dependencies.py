"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from pollqueue.api.services.queue_service import QueueService
from pollqueue.core.config.models import Config
from pollqueue.core.queue.registry import QueueRegistry


def get_registry(request: Request) -> QueueRegistry:
    """
    Get the queue registry from app state.

    Args:
        request: FastAPI request object

    Returns:
        QueueRegistry owned by the application
    """
    registry: QueueRegistry = request.app.state.registry
    return registry


def get_config(request: Request) -> Config:
    """Get application configuration from app state."""
    config: Config = request.app.state.config
    return config


async def get_queue_service(
    registry: Annotated[QueueRegistry, Depends(get_registry)],
    config: Annotated[Config, Depends(get_config)],
) -> QueueService:
    """
    Get queue service instance.

    Args:
        registry: Queue registry
        config: Application configuration

    Returns:
        QueueService instance
    """
    return QueueService(registry, config.queue)


# Type aliases for annotating dependencies
QueueServiceDep = Annotated[QueueService, Depends(get_queue_service)]

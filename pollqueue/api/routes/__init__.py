"""API route modules."""

from pollqueue.api.routes.queues import router as queues_router

__all__ = ["queues_router"]

"""Service layer for business logic."""

from pollqueue.api.services.queue_service import QueueService, extract_content

__all__ = ["QueueService", "extract_content"]

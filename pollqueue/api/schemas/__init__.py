"""Pydantic schemas for API request/response models."""

from pollqueue.api.schemas.queues import MessageResponse, SubmitResponse

__all__ = ["MessageResponse", "SubmitResponse"]

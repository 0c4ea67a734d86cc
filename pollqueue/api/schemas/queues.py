"""Pydantic schemas for queue API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SubmitResponse(BaseModel):
    """Response model for POST /api/{queue_name}.

    Attributes:
        success: Always True; submission cannot fail once the body is parsed
        message_id: Identifier of the stored message (serialized as messageId)
    """

    success: bool = True
    message_id: str = Field(alias="messageId")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class MessageResponse(BaseModel):
    """Response model for a message returned by GET /api/{queue_name}.

    Attributes:
        id: Message identifier
        content: Payload exactly as submitted
        timestamp: Creation time in epoch milliseconds
    """

    id: str
    content: Any
    timestamp: int

    model_config = ConfigDict(extra="forbid")

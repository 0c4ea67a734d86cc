"""pollqueue domain models - pure value types with no infrastructure dependencies."""

from pollqueue.model.message import Message

__all__ = ["Message"]

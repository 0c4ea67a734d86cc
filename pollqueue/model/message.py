"""Domain model for queued messages."""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Message:
    """A message submitted to a named queue.

    Immutable once created. The payload is opaque to the broker; it is stored
    and returned exactly as submitted.

    Attributes:
        content: Message payload.
        id: Unique message identifier (UUID4 string).
        timestamp: Creation time in epoch milliseconds.
    """

    content: Any
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: int = field(default_factory=_now_ms)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape returned to consumers."""
        return {"id": self.id, "content": self.content, "timestamp": self.timestamp}

"""Request normalization between HTTP and the queue registry."""

import json
import logging
import re
from typing import Any

from pollqueue.core.config.models import QueueConfig
from pollqueue.core.queue.registry import QueueRegistry
from pollqueue.model.message import Message

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def extract_content(body: bytes, content_type: str | None) -> Any:
    """Turn a POST body into a message payload.

    JSON bodies: a string is used as-is, an object contributes its ``content``
    field when that is truthy, and anything else is stored as compact JSON
    text. Other bodies are taken as UTF-8 text.

    Args:
        body: Raw request body.
        content_type: Value of the Content-Type header, if any.

    Returns:
        The payload to store.

    Raises:
        ValueError: If a JSON body cannot be decoded.
    """
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type != "application/json" and not media_type.endswith("+json"):
        return body.decode("utf-8", errors="replace")

    try:
        parsed = json.loads(body) if body else {}
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid JSON body: {e}") from e

    if isinstance(parsed, str):
        return parsed
    if isinstance(parsed, dict) and parsed.get("content"):
        return parsed["content"]
    return json.dumps(parsed, separators=(",", ":"))


class QueueService:
    """Business logic for the queue endpoints."""

    def __init__(self, registry: QueueRegistry, config: QueueConfig):
        """Initialize QueueService.

        Args:
            registry: Registry holding all named queues
            config: Long-polling defaults and limits
        """
        self.registry = registry
        self.config = config

    def parse_timeout(self, raw: str | None) -> int:
        """Normalize the ``timeout`` query parameter to milliseconds.

        The leading integer is used, so "1.5" means 1 and "5000ms" means 5000.
        Missing values and values with no leading digits fall back to the
        configured default. Negative values clamp to zero and values above
        ``max_timeout_ms`` clamp to it.
        """
        if raw is None or raw.strip() == "":
            timeout = self.config.default_timeout_ms
        else:
            match = _LEADING_INT.match(raw)
            if match:
                timeout = int(match.group(1))
            else:
                logger.warning(f"Ignoring non-numeric timeout {raw!r}, using {self.config.default_timeout_ms}ms")
                timeout = self.config.default_timeout_ms

        timeout = max(timeout, 0)
        if self.config.max_timeout_ms is not None:
            timeout = min(timeout, self.config.max_timeout_ms)
        return timeout

    def submit(self, queue_name: str, body: bytes, content_type: str | None) -> str:
        """Store a message built from a POST body and return its id.

        Raises:
            ValueError: If the body is malformed JSON.
        """
        content = extract_content(body, content_type)
        return self.registry.submit(queue_name, content)

    async def receive(self, queue_name: str, raw_timeout: str | None) -> Message | None:
        """Wait for the next message according to the ``timeout`` parameter."""
        return await self.registry.receive(queue_name, self.parse_timeout(raw_timeout))

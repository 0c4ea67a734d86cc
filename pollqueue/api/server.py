"""uvicorn server that releases long-polling consumers before draining."""

import logging
import signal
import socket
from types import FrameType

import uvicorn

from pollqueue.core.queue.registry import QueueRegistry

logger = logging.getLogger(__name__)


class BrokerServer(uvicorn.Server):
    """uvicorn.Server that closes the queue registry at the start of shutdown.

    uvicorn waits for in-flight requests to finish before it runs the
    application's lifespan shutdown, so a consumer blocked on a long poll
    would hold the stop for its whole timeout. Closing the registry first
    answers those requests with 204 and lets the drain finish promptly.
    """

    def __init__(self, config: uvicorn.Config, registry: QueueRegistry):
        """Initialize BrokerServer.

        Args:
            config: uvicorn server configuration
            registry: Registry served by the application in ``config``
        """
        super().__init__(config)
        self.registry = registry

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        if not self.should_exit:
            logger.info(f"Shutdown signal received ({signal.Signals(sig).name}), stopping...")
        super().handle_exit(sig, frame)

    async def shutdown(self, sockets: list[socket.socket] | None = None) -> None:
        self.registry.close()
        await super().shutdown(sockets=sockets)

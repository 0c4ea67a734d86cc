"""Named FIFO queues with long-polling consumers.

Every queue holds a backlog of undelivered messages and a list of consumers
blocked waiting for one. A new message goes straight to the oldest waiter when
there is one, otherwise to the tail of the backlog, so a queue never keeps both
non-empty once an operation returns.

All state is owned by a single event loop. ``submit`` and the immediate branch
of ``receive`` never await, which makes the deliver-or-enqueue and
serve-or-wait decisions atomic with respect to each other. A waiter is resolved
only by whoever removes it from its queue's waiter list: the producer handing
off a message, or the deadline timer expiring it.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from pollqueue.model.message import Message

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Waiter:
    """A consumer blocked on an empty queue.

    Compared by identity so that removal from the waiter list only ever
    matches this exact waiter.
    """

    future: asyncio.Future[Message | None]
    timer: asyncio.TimerHandle | None = None

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


@dataclass
class NamedQueue:
    """Backlog and waiter list for one queue name."""

    name: str
    backlog: deque[Message] = field(default_factory=deque)
    waiters: deque[Waiter] = field(default_factory=deque)


class QueueRegistry:
    """Process-wide collection of named queues.

    Queues are created on first reference and never removed. Construct one
    instance per server (or per test) and share it with the serving layer.
    """

    def __init__(self) -> None:
        self._queues: dict[str, NamedQueue] = {}
        self._closed = False

    def resolve_queue(self, name: str) -> NamedQueue:
        """Get or create a queue by name."""
        queue = self._queues.get(name)
        if queue is None:
            queue = NamedQueue(name=name)
            self._queues[name] = queue
            logger.debug(f"Created queue '{name}'")
        return queue

    def submit(self, queue_name: str, content: Any) -> str:
        """Add a message to a queue.

        Hands the message directly to the oldest blocked consumer if there is
        one, otherwise appends it to the backlog.

        Args:
            queue_name: Target queue.
            content: Message payload.

        Returns:
            The generated message id.
        """
        queue = self.resolve_queue(queue_name)
        message = Message(content=content)
        self._deliver(queue, message)
        return message.id

    async def receive(self, queue_name: str, timeout_ms: float) -> Message | None:
        """Take the oldest message from a queue, waiting up to ``timeout_ms``.

        Args:
            queue_name: Queue to consume from.
            timeout_ms: Maximum wait in milliseconds. Zero or less checks the
                backlog once and returns immediately, as does any receive
                after close().

        Returns:
            The oldest message, or None if none arrived before the deadline.
        """
        queue = self.resolve_queue(queue_name)

        if queue.backlog:
            return queue.backlog.popleft()

        if timeout_ms <= 0 or self._closed:
            return None

        loop = asyncio.get_running_loop()
        waiter = Waiter(future=loop.create_future())
        queue.waiters.append(waiter)
        waiter.timer = loop.call_later(timeout_ms / 1000.0, self._expire, queue, waiter)
        logger.debug(f"Consumer waiting on '{queue.name}' for {timeout_ms}ms ({len(queue.waiters)} waiting)")

        try:
            return await waiter.future
        except asyncio.CancelledError:
            self._withdraw(queue, waiter)
            raise

    def get_stats(self) -> dict[str, dict[str, int]]:
        """Get current backlog and waiter counts per queue."""
        return {
            name: {"backlog": len(queue.backlog), "waiters": len(queue.waiters)}
            for name, queue in self._queues.items()
        }

    def close(self) -> None:
        """Expire every blocked consumer immediately.

        Pending receives resolve with None and later receives no longer wait.
        Backlogged messages are left in place and go away with the registry.
        Safe to call more than once.
        """
        self._closed = True
        expired = 0
        for queue in self._queues.values():
            while queue.waiters:
                waiter = queue.waiters.popleft()
                waiter.cancel_timer()
                if not waiter.future.done():
                    waiter.future.set_result(None)
                    expired += 1
        if expired:
            logger.info(f"Released {expired} waiting consumer(s) on shutdown")

    def _deliver(self, queue: NamedQueue, message: Message, *, front: bool = False) -> None:
        """Hand a message to the oldest live waiter, or store it in the backlog."""
        while queue.waiters:
            waiter = queue.waiters.popleft()
            waiter.cancel_timer()
            # The consumer's task was cancelled but has not run its cleanup yet
            if waiter.future.done():
                continue
            waiter.future.set_result(message)
            logger.debug(f"Handed message {message.id} to waiting consumer on '{queue.name}'")
            return

        if front:
            queue.backlog.appendleft(message)
        else:
            queue.backlog.append(message)
        logger.debug(f"Queued message {message.id} on '{queue.name}' (backlog={len(queue.backlog)})")

    def _expire(self, queue: NamedQueue, waiter: Waiter) -> None:
        """Deadline callback: resolve the waiter with None if it is still waiting."""
        try:
            queue.waiters.remove(waiter)
        except ValueError:
            return
        waiter.timer = None
        if not waiter.future.done():
            waiter.future.set_result(None)
            logger.debug(f"Consumer on '{queue.name}' timed out")

    def _withdraw(self, queue: NamedQueue, waiter: Waiter) -> None:
        """Clean up after a consumer whose task was cancelled while waiting."""
        waiter.cancel_timer()
        try:
            queue.waiters.remove(waiter)
        except ValueError:
            # Already removed: a message may have been handed over in the same tick
            future = waiter.future
            if future.done() and not future.cancelled():
                message = future.result()
                if message is not None:
                    logger.debug(f"Returning message {message.id} to '{queue.name}' after consumer cancelled")
                    self._deliver(queue, message, front=True)

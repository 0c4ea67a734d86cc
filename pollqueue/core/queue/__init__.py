"""Queue subsystem for pollqueue.

Provides the named-queue registry and long-polling coordination.
"""

from pollqueue.core.queue.registry import NamedQueue, QueueRegistry, Waiter

__all__ = ["NamedQueue", "QueueRegistry", "Waiter"]

"""Core functionality for pollqueue."""

from pollqueue.core.config import Config, load_config
from pollqueue.core.queue import NamedQueue, QueueRegistry, Waiter

__all__ = [
    "Config",
    "load_config",
    "NamedQueue",
    "QueueRegistry",
    "Waiter",
]

"""Configuration package for pollqueue: Pydantic models and the YAML loader."""

from pollqueue.core.config.loader import load_config
from pollqueue.core.config.models import (
    Config,
    LoggingConfig,
    QueueConfig,
    ServerConfig,
)

__all__ = [
    "Config",
    "LoggingConfig",
    "QueueConfig",
    "ServerConfig",
    "load_config",
]

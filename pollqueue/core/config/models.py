"""Pydantic configuration models for pollqueue.

For loading logic, see loader.py.
"""

from pydantic import BaseModel, Field, field_validator


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=3000, description="Port to listen on")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 <= v <= 65535:
            raise ValueError(f"Port must be between 0 and 65535, got {v}")
        return v


class QueueConfig(BaseModel):
    """Long-polling behaviour applied by the HTTP layer."""

    default_timeout_ms: int = Field(
        default=10000, ge=0, description="Wait used when a GET omits or garbles ?timeout"
    )
    max_timeout_ms: int | None = Field(
        default=None, ge=0, description="Upper bound on ?timeout (None = no cap)"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str = Field(default="logs", description="Directory for log files")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")
    file_enabled: bool = Field(default=True, description="Write logs to a rotating file as well as the console")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown logging level: {v}")
        return level


class Config(BaseModel):
    """Root configuration model."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    queue: QueueConfig = Field(default_factory=QueueConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

"""
kvcache - Configuration Schemas

Typed configuration models using Pydantic for validation and type safety.
All configuration is defined here and validated at startup.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    TEXT = "text"
    JSON = "json"


class CacheConfig(BaseModel):
    """Remote cache connection configuration."""

    address: str = Field(default="localhost", description="Redis address as host or host:port")
    password: str = Field(default="", description="Redis password (empty = no auth)")
    db: int = Field(default=0, ge=0, description="Logical Redis database index")
    default_expire_ms: int = Field(
        default=0,
        ge=0,
        description="Default expiration in milliseconds (0 = no expiry)",
    )
    probe_on_connect: bool = Field(default=True, description="PING the server when opening a cache")
    socket_timeout: float = Field(default=5.0, gt=0, description="Redis socket timeout in seconds")
    max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Reject blank addresses early; full parsing happens in the backend."""
        v = v.strip()
        if not v:
            raise ValueError("address must not be empty")
        return v


class KVCacheConfig(BaseModel):
    """Root configuration for kvcache."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.TEXT, description="Log output format")

    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

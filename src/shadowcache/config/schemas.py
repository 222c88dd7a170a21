"""
shadowcache - Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration is defined here and validated when it is loaded.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class CacheBackend(str, Enum):
    """Supported backend stores."""

    MEMCACHED = "memcached"
    REDIS = "redis"
    MEMORY = "memory"  # Single process only


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


class ServerConfig(BaseModel):
    """A single memcached endpoint."""

    host: str = Field(default="localhost", min_length=1, description="Server hostname or IP")
    port: int = Field(default=11211, ge=1, le=65535, description="Server port")
    weight: int = Field(
        default=100,
        ge=0,
        description="Relative server weight; accepted for compatibility, key distribution ignores it",
    )


class CacheConfig(BaseModel):
    """Cache configuration."""

    backend: CacheBackend = Field(default=CacheBackend.MEMCACHED, description="Backend store to use")
    prefix: str = Field(default="", description="Namespace prepended to every physical key")
    lifetime: int = Field(default=86400, ge=0, description="Default TTL in seconds (0 = no expiry)")
    store_cache_info: bool = Field(default=False, description="Record written keys so remove_pattern() works")
    prune_registry: bool = Field(
        default=False,
        description="Drop matched keys from the key registry after remove_pattern()",
    )

    # Memcached-specific settings (only used when backend=memcached)
    servers: list[ServerConfig] = Field(default_factory=list, description="Memcached servers")
    host: str = Field(default="localhost", description="Fallback server host when no servers are listed")
    port: int = Field(default=11211, ge=1, le=65535, description="Fallback server port")
    weight: int = Field(default=100, ge=0, description="Fallback server weight (ignored by key distribution)")
    compression: bool = Field(default=False, description="Compress large values with zlib")
    binary_protocol: bool = Field(default=False, description="Request the memcached binary protocol")
    max_pool_size: int = Field(default=10, ge=1, description="Connections per memcached server")
    connect_timeout: float = Field(default=2.0, gt=0, description="Memcached connect timeout in seconds")
    timeout: float = Field(default=2.0, gt=0, description="Memcached socket timeout in seconds")

    # Redis-specific settings (only used when backend=redis)
    redis_url: str | None = Field(default=None, description="Redis connection URL")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    # Memory-specific settings (only used when backend=memory)
    max_size: int = Field(default=10000, ge=1, description="Max entries (memory backend)")

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str | None, info: Any) -> str | None:
        """Ensure redis_url is provided when backend is redis."""
        backend = info.data.get("backend")
        if backend == CacheBackend.REDIS and not v:
            raise ValueError("redis_url is required when cache backend is 'redis'")
        return v

    def resolved_servers(self) -> list[ServerConfig]:
        """Configured servers, or the single host/port/weight fallback."""
        if self.servers:
            return list(self.servers)
        return [ServerConfig(host=self.host, port=self.port, weight=self.weight)]


class ShadowCacheConfig(BaseModel):
    """Root configuration for shadowcache."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="Logging output format")

    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

"""
shadowcache - Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, parse_servers, reload_config
from .schemas import (
    CacheBackend,
    CacheConfig,
    Environment,
    LogFormat,
    LogLevel,
    ServerConfig,
    ShadowCacheConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "parse_servers",
    # Main config
    "ShadowCacheConfig",
    # Enums
    "Environment",
    "CacheBackend",
    "LogLevel",
    "LogFormat",
    # Config sections
    "CacheConfig",
    "ServerConfig",
]

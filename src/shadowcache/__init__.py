"""
shadowcache

A caching layer that adds key prefixes, per-key modification metadata and
glob-pattern invalidation on top of memcached (or Redis, or an in-process
store).
"""

from .cache import (
    MISSING,
    CacheInterface,
    CleanMode,
    ShadowCache,
    close_all_caches,
    create_cache,
    get_cache,
)
from .errors import CacheError, ConfigurationError, InitializationError, ShadowCacheError

__version__ = "0.1.0"

__all__ = [
    "create_cache",
    "get_cache",
    "close_all_caches",
    "ShadowCache",
    "CacheInterface",
    "CleanMode",
    "MISSING",
    "ShadowCacheError",
    "ConfigurationError",
    "InitializationError",
    "CacheError",
]

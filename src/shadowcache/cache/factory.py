"""
shadowcache - Cache Factory

Canonical factory for creating cache instances based on configuration.

Key points:
- Backend selected with CACHE_BACKEND=memcached|redis|memory (memcached by default,
  redis when REDIS_URL is set)
- Client libraries are imported lazily; a missing one raises InitializationError
- All configuration is typed and validated via Pydantic models

Examples:
    from shadowcache.cache.factory import create_cache, get_cache

    # Uses env-configured backend
    cache = create_cache()

    # Or explicitly supply a CacheConfig (e.g., for tests)
    from shadowcache.config import CacheConfig, CacheBackend
    cfg = CacheConfig(backend=CacheBackend.MEMORY, prefix="test:", store_cache_info=True)
    mem_cache = create_cache(cfg, name="test")
"""

from __future__ import annotations

import logging

from ..config import CacheBackend, CacheConfig, get_config
from ..errors import ConfigurationError, InitializationError
from .backends.memory import MemoryStore
from .facade import ShadowCache
from .store import BackendStore

logger = logging.getLogger(__name__)

# Global cache instances registry
_cache_instances: dict[str, ShadowCache] = {}


def _create_memory_store(config: CacheConfig) -> BackendStore:
    """Internal helper to construct an in-process store."""
    return MemoryStore(max_size=config.max_size)


def _create_memcached_store(config: CacheConfig) -> BackendStore:
    """Internal helper to construct a memcached store with lazy import."""
    try:
        from .backends.memcached import MemcachedStore
    except ImportError as e:
        logger.error(
            "Memcached backend selected but pymemcache is not installed",
            extra={"package": "pymemcache>=4.0", "error": str(e)},
        )
        raise InitializationError(
            "Memcached backend selected but the pymemcache client is unavailable",
            package="pymemcache",
            install_hint="pip install 'pymemcache>=4.0'",
            details={"error": str(e), "backend": "memcached"},
        ) from e

    return MemcachedStore(
        servers=config.resolved_servers(),
        compression=config.compression,
        binary_protocol=config.binary_protocol,
        max_pool_size=config.max_pool_size,
        connect_timeout=config.connect_timeout,
        timeout=config.timeout,
    )


def _create_redis_store(config: CacheConfig) -> BackendStore:
    """Internal helper to construct a redis store with lazy import."""
    if not config.redis_url:
        raise ConfigurationError(
            "REDIS_URL must be set when CACHE_BACKEND=redis",
            details={"env": "REDIS_URL", "backend": "redis"},
        )

    try:
        from .backends.redis import RedisStore
    except ImportError as e:
        logger.error(
            "Redis backend selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise InitializationError(
            "Redis backend selected but the redis client is unavailable",
            package="redis",
            install_hint="pip install 'redis>=5.0.0'",
            details={"error": str(e), "backend": "redis"},
        ) from e

    return RedisStore(
        redis_url=config.redis_url,
        max_connections=config.redis_max_connections,
        socket_timeout=config.redis_socket_timeout,
    )


_STORE_BUILDERS = {
    CacheBackend.MEMCACHED: _create_memcached_store,
    CacheBackend.REDIS: _create_redis_store,
    CacheBackend.MEMORY: _create_memory_store,
}


def create_cache(
    config: CacheConfig | None = None,
    name: str = "default",
) -> ShadowCache:
    """
    Create a cache instance based on configuration.

    Args:
        config: Cache configuration (uses global config if not provided)
        name: Cache instance name (for multiple cache instances)

    Returns:
        Configured cache instance

    Raises:
        ConfigurationError: If cache configuration is invalid
        InitializationError: If the backend cannot be constructed
    """
    # Return existing instance if already created
    if name in _cache_instances:
        logger.debug("Returning existing cache instance: %s", name)
        return _cache_instances[name]

    if config is None:
        config = get_config().cache

    backend = CacheBackend(config.backend)
    logger.info(
        "Creating cache instance '%s' with backend: %s",
        name,
        backend.value,
        extra={"cache_name": name, "backend": backend.value, "prefix": config.prefix},
    )

    builder = _STORE_BUILDERS.get(backend)
    if builder is None:
        raise ConfigurationError(
            f"Unknown cache backend: {config.backend}",
            details={"backend": str(config.backend), "supported": [b.value for b in CacheBackend]},
        )

    try:
        store = builder(config)
    except (ConfigurationError, InitializationError):
        raise
    except Exception as e:
        logger.error(
            "Unexpected error creating cache instance '%s': %s",
            name,
            e,
            extra={"cache_name": name, "backend": backend.value, "error": str(e)},
            exc_info=True,
        )
        raise InitializationError(
            f"Failed to create cache instance '{name}': {e}",
            details={"cache_name": name, "backend": backend.value, "error": str(e)},
        ) from e

    cache = ShadowCache(
        store,
        prefix=config.prefix,
        lifetime=config.lifetime,
        store_cache_info=config.store_cache_info,
        prune_registry=config.prune_registry,
    )
    _cache_instances[name] = cache

    logger.info(
        "Cache instance '%s' created successfully",
        name,
        extra={"cache_name": name, "backend": backend.value},
    )
    return cache


def get_cache(name: str = "default") -> ShadowCache:
    """
    Get an existing cache instance by name.

    If the instance doesn't exist, it is created from the global configuration.
    """
    if name not in _cache_instances:
        logger.debug("Cache instance '%s' not found, creating new instance", name)
        return create_cache(name=name)

    return _cache_instances[name]


def close_all_caches() -> None:
    """
    Close all cache instances and release their connections.

    Should be called during graceful shutdown.
    """
    if not _cache_instances:
        logger.debug("No cache instances to close")
        return

    logger.info("Closing %d cache instance(s)...", len(_cache_instances))

    for name, cache in list(_cache_instances.items()):
        try:
            cache.close()
            logger.info("Closed cache instance: %s", name)
        except Exception as e:
            logger.error(
                "Error closing cache instance '%s': %s",
                name,
                e,
                extra={"cache_name": name, "error": str(e)},
                exc_info=True,
            )

    _cache_instances.clear()


def reset_cache_factory() -> None:
    """
    Forget all cache instances without closing them.

    Warning: Only use this in testing contexts.
    """
    count = len(_cache_instances)
    _cache_instances.clear()
    logger.debug("Reset cache factory, cleared %d instance reference(s)", count)


def list_cache_instances() -> list[str]:
    """List all registered cache instance names."""
    return list(_cache_instances.keys())

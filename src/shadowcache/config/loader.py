"""
shadowcache - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the runtime.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import ShadowCacheConfig

logger = logging.getLogger(__name__)

_config_instance: ShadowCacheConfig | None = None

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


def parse_servers(raw: str | None) -> list[dict[str, Any]]:
    """
    Parse a MEMCACHED_SERVERS value.

    Accepts a comma separated list of ``host[:port[:weight]]`` entries,
    e.g. ``"cache1:11211:60,cache2:11211:40,cache3"``.

    Raises:
        ConfigurationError: If a port or weight is not an integer
    """
    if not raw:
        return []

    servers: list[dict[str, Any]] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue

        parts = entry.split(":")
        if len(parts) > 3:
            raise ConfigurationError(
                f"Invalid memcached server entry: {entry!r}",
                details={"env": "MEMCACHED_SERVERS", "entry": entry},
            )

        server: dict[str, Any] = {"host": parts[0]}
        try:
            if len(parts) > 1 and parts[1]:
                server["port"] = int(parts[1])
            if len(parts) > 2 and parts[2]:
                server["weight"] = int(parts[2])
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid memcached server entry: {entry!r}",
                details={"env": "MEMCACHED_SERVERS", "entry": entry, "error": str(e)},
            ) from e
        servers.append(server)

    return servers


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> ShadowCacheConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated ShadowCacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    # Load .env file if exists
    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    # Auto-detect backend: Redis if REDIS_URL is set, else memcached
    redis_url = os.getenv("REDIS_URL")
    cache_backend = "redis" if redis_url else "memcached"

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "json").lower(),
            "cache": {
                "backend": os.getenv("CACHE_BACKEND", cache_backend).lower(),
                "prefix": os.getenv("CACHE_PREFIX", ""),
                "lifetime": int(os.getenv("CACHE_LIFETIME", "86400")),
                "store_cache_info": _env_bool("CACHE_STORE_CACHE_INFO"),
                "prune_registry": _env_bool("CACHE_PRUNE_REGISTRY"),
                "servers": parse_servers(os.getenv("MEMCACHED_SERVERS")),
                "host": os.getenv("MEMCACHED_HOST", "localhost"),
                "port": int(os.getenv("MEMCACHED_PORT", "11211")),
                "weight": int(os.getenv("MEMCACHED_WEIGHT", "100")),
                "compression": _env_bool("MEMCACHED_COMPRESSION"),
                "binary_protocol": _env_bool("MEMCACHED_BINARY_PROTOCOL"),
                "max_pool_size": int(os.getenv("MEMCACHED_POOL_SIZE", "10")),
                "connect_timeout": float(os.getenv("MEMCACHED_CONNECT_TIMEOUT", "2.0")),
                "timeout": float(os.getenv("MEMCACHED_TIMEOUT", "2.0")),
                "redis_url": redis_url,
                "redis_max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
                "redis_socket_timeout": int(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
                "max_size": int(os.getenv("CACHE_MAX_SIZE", "10000")),
            },
        }
    except ValueError as e:
        logger.error(f"Invalid numeric configuration value: {e}", extra={"error": str(e)})
        raise ConfigurationError(
            f"Invalid numeric configuration value: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = ShadowCacheConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment})",
            extra={"environment": _config_instance.environment, "cache_backend": _config_instance.cache.backend},
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> ShadowCacheConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current ShadowCacheConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> ShadowCacheConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded ShadowCacheConfig instance
    """
    return load_config(env_file=env_file, reload=True)

"""
shadowcache - Observability Module

Logging setup for applications embedding the cache.

Usage:
    from shadowcache.config import get_config
    from shadowcache.observability import configure_logging

    config = get_config()
    configure_logging(config.log_level, json_format=config.log_format == "json")
"""

from .logs import JSONFormatter, configure_logging

__all__ = [
    "JSONFormatter",
    "configure_logging",
]

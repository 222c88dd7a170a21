"""
shadowcache - Cache Module

Key-value caching with prefixes, per-key metadata and pattern removal over a
pluggable backend store.

Layout:
- factory.py: builds caches from configuration
- facade.py: ShadowCache, the public operation surface
- interface.py: abstract facade contract and CleanMode
- keys.py / metadata.py / registry.py: the layers ShadowCache composes
- store.py + backends/: backend store contract and implementations

Usage:
    from shadowcache.cache import create_cache

    cache = create_cache()
    cache.set("key", "value", ttl=3600)
    value = cache.get("key")
"""

from .facade import ShadowCache
from .factory import (
    close_all_caches,
    create_cache,
    get_cache,
    list_cache_instances,
    reset_cache_factory,
)
from .interface import CacheInterface, CleanMode
from .keys import SEPARATOR, KeyNamespacer
from .metadata import MetadataRecord
from .store import MISSING, BackendStore

__all__ = [
    # Factory functions
    "create_cache",
    "get_cache",
    "close_all_caches",
    "list_cache_instances",
    "reset_cache_factory",
    # Facade and interface
    "ShadowCache",
    "CacheInterface",
    "CleanMode",
    "SEPARATOR",
    "KeyNamespacer",
    "MetadataRecord",
    # Backend store contract
    "BackendStore",
    "MISSING",
]

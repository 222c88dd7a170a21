"""
shadowcache - Cache Facade

ShadowCache layers namespacing, per-key metadata and pattern removal on top of
a primitive backend store.

Every operation is a short sequence of blocking backend calls. Nothing here
takes locks or retries, so the multi-call operations are best-effort:

- set() writes the metadata record, then (optionally) the key registry, then
  the value. A failure in between leaves metadata describing a write that did
  not land.
- The registry append can lose entries under concurrent writers.
- clean(CleanMode.ALL) flushes the entire backend, including keys written by
  other instances under other prefixes.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from ..errors import CacheError, ConfigurationError
from .interface import CacheInterface, CleanMode
from .keys import KeyNamespacer
from .metadata import MetadataRecord, MetadataTracker
from .registry import KeyRegistry
from .store import MISSING, BackendStore

logger = logging.getLogger(__name__)


class ShadowCache(CacheInterface):
    """
    Cache facade over a BackendStore.

    Example:
        cache = ShadowCache(MemoryStore(), prefix="app:", store_cache_info=True)
        cache.set("user:1", {"name": "Ada"}, ttl=600)
        cache.get_timeout("user:1")      # write time + 600
        cache.remove_pattern("user:*")   # needs store_cache_info
    """

    def __init__(
        self,
        store: BackendStore,
        prefix: str = "",
        lifetime: int = 86400,
        store_cache_info: bool = False,
        prune_registry: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache facade.

        Args:
            store: Backend store holding values, metadata and the key registry
            prefix: Namespace prepended to every physical key
            lifetime: Default TTL in seconds used when set() gets no ttl
            store_cache_info: Record written keys so remove_pattern() works
            prune_registry: Drop matched keys from the registry in remove_pattern()
            clock: Time source for metadata timestamps
        """
        self.store = store
        self.lifetime = lifetime
        self.store_cache_info = store_cache_info
        self.prune_registry = prune_registry

        self.namespacer = KeyNamespacer(prefix)
        self.metadata = MetadataTracker(store, self.namespacer, clock=clock)
        self.registry = KeyRegistry(store, self.namespacer)

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

    @property
    def prefix(self) -> str:
        return self.namespacer.prefix

    def get_backend(self) -> Any:
        return self.store.client

    def get(self, key: str, default: Any = None) -> Any:
        value = self.store.get(self.namespacer.physical_key(key))
        if value is MISSING:
            self._misses += 1
            return default

        self._hits += 1
        return value

    def has(self, key: str) -> bool:
        return self.store.get(self.namespacer.physical_key(key)) is not MISSING

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if value is MISSING:
            raise CacheError("MISSING cannot be stored as a cache value", details={"key": key})

        ttl = self.lifetime if ttl is None else ttl
        if ttl < 0:
            raise CacheError(
                "ttl must be zero (no expiry) or a positive number of seconds",
                details={"key": key, "ttl": ttl},
            )

        physical_key = self.namespacer.physical_key(key)

        self.metadata.write(key, ttl)

        if self.store_cache_info:
            self.registry.append(physical_key)

        # replace() first so existing entries keep update semantics
        if self.store.replace(physical_key, value, ttl) or self.store.set(physical_key, value, ttl):
            self._sets += 1
            return True

        logger.warning(
            f"Failed to write key '{key}'; its metadata record may be stale",
            extra={"key": key, "physical_key": physical_key, "ttl": ttl},
        )
        return False

    def remove(self, key: str) -> bool:
        self.metadata.delete(key)

        deleted = self.store.delete(self.namespacer.physical_key(key))
        if deleted:
            self._deletes += 1
        return deleted

    def clean(self, mode: CleanMode | str = CleanMode.ALL) -> bool:
        if mode != CleanMode.ALL:
            logger.debug(f"clean() mode '{mode}' is not implemented; nothing removed", extra={"mode": str(mode)})
            return False

        logger.warning(
            "Flushing the entire backend; entries under every prefix are removed",
            extra={"prefix": self.prefix},
        )
        return self.store.flush()

    def remove_pattern(self, pattern: str) -> int:
        if not self.store_cache_info:
            raise ConfigurationError(
                'To use remove_pattern(), the "store_cache_info" option must be enabled',
                details={"feature": "store_cache_info", "pattern": pattern},
            )

        regex = self.namespacer.pattern_to_regex(pattern)
        matched = [k for k in self.registry.keys() if regex.match(k)]

        deleted = 0
        for physical_key in matched:
            if self.store.delete(physical_key):
                deleted += 1

        self._deletes += deleted
        logger.debug(
            f"remove_pattern('{pattern}') deleted {deleted} of {len(matched)} matching entries",
            extra={"prefix": self.prefix, "pattern": pattern, "matched": len(matched), "deleted": deleted},
        )

        if self.prune_registry and matched:
            self.registry.discard(matched)

        return deleted

    def get_many(self, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}

        physical = {self.namespacer.physical_key(k): k for k in keys}
        found = self.store.get_many(list(physical))

        self._hits += len(found)
        self._misses += len(physical) - len(found)
        return {physical.get(pk, self.namespacer.logical_key(pk)): value for pk, value in found.items()}

    def get_metadata(self, key: str) -> MetadataRecord | None:
        """The metadata record for key, or None if there is none."""
        return self.metadata.read(key)

    def get_last_modified(self, key: str) -> int:
        record = self.metadata.read(key)
        return record.last_modified if record else 0

    def get_timeout(self, key: str) -> int:
        record = self.metadata.read(key)
        return record.timeout if record else 0

    def get_stats(self) -> dict[str, Any]:
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

        return {
            **self.store.get_stats(),
            "prefix": self.prefix,
            "lifetime": self.lifetime,
            "store_cache_info": self.store_cache_info,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 2),
            "sets": self._sets,
            "deletes": self._deletes,
        }

    def close(self) -> None:
        self.store.close()
        logger.debug(f"Cache closed for prefix '{self.prefix}'")

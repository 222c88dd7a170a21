"""
shadowcache - Memory Backend Store

In-process store with LRU eviction and TTL support.
Thread-safe and suitable for single-process deployments and tests.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from ..store import MISSING, BackendStore

logger = logging.getLogger(__name__)


class MemoryStore(BackendStore):
    """
    In-memory backend store with LRU eviction.

    Several cache facades may share one MemoryStore to emulate a shared
    memcached pool (e.g. to observe the global effect of flush()).
    """

    def __init__(
        self,
        max_size: int = 10000,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize memory store.

        Args:
            max_size: Maximum number of entries (LRU eviction when exceeded)
            clock: Time source used for expiry checks
        """
        self.max_size = max_size
        self._clock = clock

        # Storage: key -> (value, expiry_time)
        self._data: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()
        self._evictions = 0

        self._lock = threading.Lock()

    def _is_expired(self, expiry: float | None) -> bool:
        """Check if entry is expired."""
        if expiry is None:
            return False
        return self._clock() > expiry

    def _expiry(self, ttl: int) -> float | None:
        return self._clock() + ttl if ttl > 0 else None

    def _lookup(self, key: str) -> Any:
        """Return the live value for key or MISSING. Caller holds the lock."""
        entry = self._data.get(key)
        if entry is None:
            return MISSING

        value, expiry = entry
        if self._is_expired(expiry):
            del self._data[key]
            return MISSING

        self._data.move_to_end(key)
        return value

    def _store(self, key: str, value: Any, ttl: int) -> None:
        """Write an entry, evicting the least recently used one if full. Caller holds the lock."""
        if key not in self._data and len(self._data) >= self.max_size:
            evicted_key, _ = self._data.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted key from memory store: {evicted_key}")

        self._data[key] = (value, self._expiry(ttl))
        self._data.move_to_end(key)

    @property
    def client(self) -> "MemoryStore":
        return self

    def get(self, key: str) -> Any:
        with self._lock:
            return self._lookup(key)

    def set(self, key: str, value: Any, ttl: int = 0) -> bool:
        with self._lock:
            self._store(key, value, ttl)
            return True

    def replace(self, key: str, value: Any, ttl: int = 0) -> bool:
        with self._lock:
            if self._lookup(key) is MISSING:
                return False
            self._store(key, value, ttl)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            if self._lookup(key) is MISSING:
                return False
            del self._data[key]
            return True

    def flush(self) -> bool:
        with self._lock:
            size = len(self._data)
            self._data.clear()
        logger.info(f"Flushed {size} entries from memory store")
        return True

    def get_many(self, keys: list[str]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        with self._lock:
            for key in keys:
                value = self._lookup(key)
                if value is not MISSING:
                    result[key] = value
        return result

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "size": len(self._data),
                "max_size": self.max_size,
                "evictions": self._evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

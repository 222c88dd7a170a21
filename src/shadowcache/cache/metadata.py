"""
shadowcache - Metadata Tracker

Keeps a shadow record next to every cached value so the cache can answer
"when was this key last written and when does it expire" on backends that
cannot.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .keys import KeyNamespacer
from .store import BackendStore


@dataclass(frozen=True)
class MetadataRecord:
    """Write time and expiry time of a key, in unix seconds."""

    last_modified: int
    timeout: int

    def to_dict(self) -> dict[str, int]:
        return {"lastModified": self.last_modified, "timeout": self.timeout}

    @classmethod
    def from_stored(cls, data: Any) -> "MetadataRecord | None":
        """Rebuild a record from its stored form; None for anything unrecognised."""
        if not isinstance(data, dict):
            return None
        try:
            return cls(last_modified=int(data["lastModified"]), timeout=int(data["timeout"]))
        except (KeyError, TypeError, ValueError):
            return None


class MetadataTracker:
    """
    Reads and writes metadata records through a backend store.

    The record is written with the same TTL as the data entry it describes so
    both expire together. The two writes are independent backend calls.
    """

    def __init__(
        self,
        store: BackendStore,
        namespacer: KeyNamespacer,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._keys = namespacer
        self._clock = clock

    def now(self) -> int:
        return int(self._clock())

    def write(self, key: str, ttl: int) -> MetadataRecord:
        """Record a write of key happening now. The store's acknowledgement is not checked."""
        now = self.now()
        record = MetadataRecord(last_modified=now, timeout=now + ttl)
        self._store.set(self._keys.metadata_key(key), record.to_dict(), ttl)
        return record

    def read(self, key: str) -> MetadataRecord | None:
        return MetadataRecord.from_stored(self._store.get(self._keys.metadata_key(key)))

    def delete(self, key: str) -> bool:
        return self._store.delete(self._keys.metadata_key(key))

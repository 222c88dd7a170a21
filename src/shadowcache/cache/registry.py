"""
shadowcache - Key Registry

An append-only list of every physical key written under a prefix, stored in a
single backend entry. It gives remove_pattern() something to enumerate on
backends with no key scanning.

Known gaps, kept as-is:
- append() is a read-modify-write. Two writers appending at the same time can
  lose one entry (last write of the whole list wins), after which
  remove_pattern() will not see that key.
- Keys are never deduplicated. A key written N times appears N times.
"""

import logging
from collections.abc import Iterable

from .keys import KeyNamespacer
from .store import BackendStore

logger = logging.getLogger(__name__)


class KeyRegistry:
    """Registry of physical keys stored at ``prefix + "_metadata"``."""

    def __init__(self, store: BackendStore, namespacer: KeyNamespacer):
        self._store = store
        self._keys = namespacer

    def keys(self) -> list[str]:
        """Current registry contents; an absent or malformed entry reads as empty."""
        stored = self._store.get(self._keys.registry_key())
        if not isinstance(stored, list):
            return []
        return list(stored)

    def append(self, physical_key: str) -> bool:
        """Add a physical key. The registry entry never expires (TTL 0)."""
        keys = self.keys()
        keys.append(physical_key)
        return self._write(keys)

    def discard(self, physical_keys: Iterable[str]) -> bool:
        """Rewrite the registry without the given keys."""
        drop = set(physical_keys)
        if not drop:
            return True

        keys = self.keys()
        kept = [k for k in keys if k not in drop]
        logger.debug(
            f"Pruning {len(keys) - len(kept)} registry entries",
            extra={"registry_key": self._keys.registry_key(), "remaining": len(kept)},
        )
        return self._write(kept)

    def _write(self, keys: list[str]) -> bool:
        ok = self._store.set(self._keys.registry_key(), keys, 0)
        if not ok:
            logger.warning(
                "Failed to write key registry",
                extra={"registry_key": self._keys.registry_key(), "size": len(keys)},
            )
        return ok

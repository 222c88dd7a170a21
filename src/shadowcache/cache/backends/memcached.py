"""
shadowcache - Memcached Backend Store

Synchronous memcached store built on pymemcache's HashClient:
- Consistent hashing across every configured server
- Per-server connection pooling
- Pickle serialization, optionally zlib-compressed
- Acknowledged writes (noreply disabled) so replace() can report a miss

Requires: pymemcache>=4.0

Example:
    store = MemcachedStore(servers=[ServerConfig(host="cache1"), ServerConfig(host="cache2")])
    store.set("greeting", {"msg": "hello"}, ttl=60)
    val = store.get("greeting")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from ...config.schemas import ServerConfig
from ..store import MISSING, BackendStore

logger = logging.getLogger(__name__)

# memcached reads larger expire values as absolute unix timestamps
MAX_RELATIVE_EXPIRE = 30 * 86400

try:
    from pymemcache import serde
    from pymemcache.client.hash import HashClient
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "pymemcache is required for the memcached backend but is not installed. "
        "Install with: pip install 'pymemcache>=4.0'"
    ) from e


class MemcachedStore(BackendStore):
    """
    Memcached backend store.

    Notes:
    - Server weights are accepted for configuration compatibility; pymemcache's
      rendezvous hashing distributes keys evenly regardless of weight.
    - pymemcache only speaks the text protocol, so binary_protocol is reported
      and ignored.
    - TTLs above 30 days are sent as absolute unix timestamps.
    """

    def __init__(
        self,
        servers: list[ServerConfig] | None = None,
        compression: bool = False,
        binary_protocol: bool = False,
        max_pool_size: int = 10,
        connect_timeout: float = 2.0,
        timeout: float = 2.0,
        client: Any | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize memcached store.

        Args:
            servers: Memcached endpoints (default: localhost:11211)
            compression: Compress values with zlib above pymemcache's size threshold
            binary_protocol: Request the binary protocol (unsupported, logged)
            max_pool_size: Connection pool size per server
            connect_timeout: Connect timeout in seconds
            timeout: Socket timeout in seconds
            client: Prebuilt client to use instead of creating one
            clock: Time source for converting long TTLs to timestamps
        """
        self.compression = compression
        self.binary_protocol = binary_protocol
        self._clock = clock

        if client is not None:
            self._client = client
            self.servers: list[ServerConfig] = list(servers or [])
            return

        self.servers = list(servers or [ServerConfig()])

        if binary_protocol:
            logger.warning(
                "Binary protocol requested but pymemcache only supports the text protocol",
                extra={"binary_protocol": True},
            )

        if len({s.weight for s in self.servers}) > 1:
            logger.debug(
                "Server weights are not used by rendezvous hashing",
                extra={"servers": [f"{s.host}:{s.port}" for s in self.servers]},
            )

        self._client = HashClient(
            [(s.host, s.port) for s in self.servers],
            serde=serde.CompressedSerde() if compression else serde.pickle_serde,
            connect_timeout=connect_timeout,
            timeout=timeout,
            use_pooling=True,
            max_pool_size=max_pool_size,
            allow_unicode_keys=True,
            default_noreply=False,
        )

    def _expire(self, ttl: int) -> int:
        if ttl > MAX_RELATIVE_EXPIRE:
            return int(self._clock()) + ttl
        return ttl

    @property
    def client(self) -> Any:
        return self._client

    def get(self, key: str) -> Any:
        try:
            return self._client.get(key, default=MISSING)
        except Exception as e:
            logger.error(
                f"Failed to get key '{key}' from memcached: {e}",
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            return MISSING

    def set(self, key: str, value: Any, ttl: int = 0) -> bool:
        try:
            return bool(self._client.set(key, value, expire=self._expire(ttl), noreply=False))
        except Exception as e:
            logger.error(
                f"Failed to set key '{key}' in memcached: {e}",
                extra={"key": key, "ttl": ttl, "error": str(e)},
                exc_info=True,
            )
            return False

    def replace(self, key: str, value: Any, ttl: int = 0) -> bool:
        try:
            return bool(self._client.replace(key, value, expire=self._expire(ttl), noreply=False))
        except Exception as e:
            logger.error(
                f"Failed to replace key '{key}' in memcached: {e}",
                extra={"key": key, "ttl": ttl, "error": str(e)},
                exc_info=True,
            )
            return False

    def delete(self, key: str) -> bool:
        try:
            return bool(self._client.delete(key, noreply=False))
        except Exception as e:
            logger.error(
                f"Failed to delete key '{key}' from memcached: {e}",
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            return False

    def flush(self) -> bool:
        try:
            self._client.flush_all(noreply=False)
        except Exception as e:
            logger.error(f"Failed to flush memcached: {e}", extra={"error": str(e)}, exc_info=True)
            return False

        logger.info(
            "Flushed all memcached servers",
            extra={"servers": [f"{s.host}:{s.port}" for s in self.servers]},
        )
        return True

    def get_many(self, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}

        try:
            return dict(self._client.get_many(keys))
        except Exception as e:
            logger.error(
                f"Failed to get multiple keys from memcached: {e}",
                extra={"key_count": len(keys), "error": str(e)},
                exc_info=True,
            )
            return {}

    def get_stats(self) -> dict[str, Any]:
        return {
            "backend": "memcached",
            "servers": [f"{s.host}:{s.port}" for s in self.servers],
            "compression": self.compression,
        }

    def close(self) -> None:
        try:
            self._client.close()
            logger.info("Closed memcached store")
        except Exception as e:
            logger.error(f"Error closing memcached client: {e}", extra={"error": str(e)}, exc_info=True)

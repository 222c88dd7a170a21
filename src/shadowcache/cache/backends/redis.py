"""
shadowcache - Redis Backend Store

Synchronous Redis store with:
- JSON serialization for values
- Per-key TTL via SET EX
- replace() implemented as SET XX
- Bounded connection pool

Requires: redis>=5.0

Example:
    store = RedisStore(redis_url="redis://localhost:6379/0")
    store.set("greeting", {"msg": "hello"}, ttl=60)
    val = store.get("greeting")
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..store import MISSING, BackendStore

logger = logging.getLogger(__name__)

try:
    from redis import ConnectionPool, Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisStore(BackendStore):
    """
    Redis backend store with JSON serialization and TTL.

    Notes:
    - Values are stored as UTF-8 JSON strings, so they must be JSON serializable.
    - A stored JSON ``null`` is a value; only a missing key maps to MISSING.
    - flush() is FLUSHDB: it clears the whole selected database.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        max_connections: int = 10,
        socket_timeout: int = 5,
        client: Redis | None = None,
    ) -> None:
        """
        Initialize Redis store.

        Args:
            redis_url: Connection URL, e.g. redis://localhost:6379/0 or rediss:// for TLS
            max_connections: Connection pool size
            socket_timeout: Socket timeout in seconds
            client: Prebuilt client to use instead of creating one
        """
        if client is not None:
            self._client = client
            return

        if not redis_url:
            raise ValueError("redis_url is required")

        pool = ConnectionPool.from_url(
            redis_url,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
        )
        # Connects lazily on first command
        self._client = Redis(connection_pool=pool)

    # ------------ Helpers ------------

    @staticmethod
    def _to_json(value: Any) -> str:
        """Serialize value to JSON string."""
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def _from_json(data: str | bytes) -> Any:
        """Deserialize a JSON payload, returning undecodable data as-is."""
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError:
                return data
        try:
            return json.loads(data)
        except ValueError as e:
            logger.warning(
                f"Failed to decode JSON from cache, returning raw data: {e}",
                extra={"data_preview": data[:100], "error": str(e)},
            )
            return data

    @staticmethod
    def _ex(ttl: int) -> int | None:
        """Map a TTL to SET's EX argument (0 -> no expiry)."""
        return ttl if ttl > 0 else None

    # ------------ Store Interface ------------

    @property
    def client(self) -> Redis:
        return self._client

    def get(self, key: str) -> Any:
        try:
            data = self._client.get(key)
        except Exception as e:
            logger.error(
                f"Failed to get key '{key}' from Redis: {e}",
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            return MISSING

        if data is None:
            return MISSING
        return self._from_json(data)

    def _write(self, key: str, value: Any, ttl: int, only_existing: bool) -> bool:
        try:
            payload = self._to_json(value)
        except (TypeError, ValueError) as e:
            logger.error(
                f"Failed to serialize value for key '{key}': {e}",
                extra={"key": key, "value_type": type(value).__name__, "error": str(e)},
                exc_info=True,
            )
            return False

        try:
            # None when XX is set and the key does not exist
            return bool(self._client.set(key, payload, ex=self._ex(ttl), xx=only_existing))
        except Exception as e:
            logger.error(
                f"Failed to write key '{key}' to Redis: {e}",
                extra={"key": key, "ttl": ttl, "error": str(e)},
                exc_info=True,
            )
            return False

    def set(self, key: str, value: Any, ttl: int = 0) -> bool:
        return self._write(key, value, ttl, only_existing=False)

    def replace(self, key: str, value: Any, ttl: int = 0) -> bool:
        return self._write(key, value, ttl, only_existing=True)

    def delete(self, key: str) -> bool:
        try:
            return bool(self._client.delete(key))
        except Exception as e:
            logger.error(
                f"Failed to delete key '{key}' from Redis: {e}",
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            return False

    def flush(self) -> bool:
        try:
            result = bool(self._client.flushdb())
        except Exception as e:
            logger.error(f"Failed to flush Redis database: {e}", extra={"error": str(e)}, exc_info=True)
            return False

        logger.info("Flushed Redis database")
        return result

    def get_many(self, keys: list[str]) -> dict[str, Any]:
        """Retrieve multiple values in one round-trip using MGET."""
        if not keys:
            return {}

        try:
            values = self._client.mget(keys)
        except Exception as e:
            logger.error(
                f"Failed to get multiple keys from Redis: {e}",
                extra={"key_count": len(keys), "error": str(e)},
                exc_info=True,
            )
            return {}

        # mget preserves order
        return {k: self._from_json(raw) for k, raw in zip(keys, values) if raw is not None}

    def get_stats(self) -> dict[str, Any]:
        stats: dict[str, Any] = {"backend": "redis", "connected": False}
        try:
            stats["connected"] = bool(self._client.ping())
            info = self._client.info(section="server")
            stats["redis_version"] = info.get("redis_version")
        except Exception as e:
            # INFO may be restricted
            logger.warning(f"Failed to get Redis INFO (restricted or unavailable): {e}", extra={"error": str(e)})
        return stats

    def close(self) -> None:
        try:
            self._client.close()
            logger.info("Closed Redis store")
        except Exception as e:
            logger.error(f"Error closing Redis client: {e}", extra={"error": str(e)}, exc_info=True)
        finally:
            try:
                self._client.connection_pool.disconnect()
            except Exception as e:
                logger.warning(f"Error disconnecting Redis connection pool: {e}", extra={"error": str(e)})

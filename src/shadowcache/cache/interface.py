"""
shadowcache - Cache Interface

Defines the abstract interface of a cache facade.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from .keys import SEPARATOR


class CleanMode(str, Enum):
    """Modes accepted by CacheInterface.clean()."""

    OLD = "old"
    ALL = "all"


class CacheInterface(ABC):
    """
    Abstract base class for cache facades.

    Keys passed to these methods are logical keys; implementations decide how
    they map onto the backend.
    """

    SEPARATOR = SEPARATOR

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a value from the cache.

        Args:
            key: Cache key
            default: Returned when the key is not cached

        Returns:
            Cached value if found, ``default`` otherwise
        """

    @abstractmethod
    def has(self, key: str) -> bool:
        """
        Check if a key is cached.

        Args:
            key: Cache key to check

        Returns:
            True if the backend reports a value for the key
        """

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """
        Store a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time-to-live in seconds (None = use default lifetime, 0 = no expiry)

        Returns:
            True if the backend acknowledged the write

        Raises:
            CacheError: If ttl is negative
        """

    @abstractmethod
    def remove(self, key: str) -> bool:
        """
        Remove a key from the cache.

        Returns:
            True if the value was deleted, False if it didn't exist
        """

    @abstractmethod
    def remove_pattern(self, pattern: str) -> int:
        """
        Remove every key matching a glob pattern.

        ``*`` matches any sequence of characters and ``?`` a single character.

        Returns:
            Number of entries deleted
        """

    @abstractmethod
    def clean(self, mode: CleanMode | str = CleanMode.ALL) -> bool:
        """
        Clean the cache.

        Args:
            mode: CleanMode.ALL (or "all") removes everything; any other value does nothing

        Returns:
            True if the backend was cleaned
        """

    @abstractmethod
    def get_last_modified(self, key: str) -> int:
        """Unix timestamp of the last write of key, or 0 if unknown."""

    @abstractmethod
    def get_timeout(self, key: str) -> int:
        """Unix timestamp at which key expires, or 0 if unknown."""

    @abstractmethod
    def get_backend(self) -> Any:
        """The underlying backend client."""

    @abstractmethod
    def get_many(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple values from the cache.

        Args:
            keys: List of cache keys

        Returns:
            Dictionary mapping keys to values (missing keys are omitted)
        """

    def get_stats(self) -> dict[str, Any]:
        """Cache statistics (hits, misses, ...)."""
        return {}

    def close(self) -> None:
        """
        Close the cache and release backend resources.

        Should be called during graceful shutdown.
        """
        return None

"""
shadowcache - Backend Store Interface

The primitive key-value capability set the cache facade is layered on.
Stores know nothing about prefixes, metadata or the key registry; they move
opaque values to and from physical keys.
"""

from abc import ABC, abstractmethod
from typing import Any


class _Missing:
    """Type of the MISSING sentinel."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()
"""Returned by ``BackendStore.get`` when a key is absent (or the read failed)."""


class BackendStore(ABC):
    """
    Abstract base class for backend stores.

    All methods are synchronous and perform at most one logical backend
    round-trip. Transport failures are logged by the implementation and
    reported as a miss (``MISSING``) or a failed write (``False``); they are
    never raised to the caller.

    TTLs are relative, in seconds; ``0`` means the entry never expires.
    """

    @abstractmethod
    def get(self, key: str) -> Any:
        """
        Retrieve a value.

        Returns:
            The stored value, or MISSING if the key is absent
        """

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int = 0) -> bool:
        """Store a value unconditionally. Returns the write acknowledgement."""

    @abstractmethod
    def replace(self, key: str, value: Any, ttl: int = 0) -> bool:
        """Store a value only if the key already exists."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key. Returns False if it did not exist."""

    @abstractmethod
    def flush(self) -> bool:
        """Remove every entry the backend holds, regardless of prefix."""

    @abstractmethod
    def get_many(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve several values in one request.

        Returns:
            Mapping of key to value for found keys only
        """

    @property
    @abstractmethod
    def client(self) -> Any:
        """The underlying client object."""

    def get_stats(self) -> dict[str, Any]:
        """Backend specific statistics."""
        return {}

    def close(self) -> None:
        """Release connections. Default implementation does nothing."""
        return None

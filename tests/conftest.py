"""
shadowcache - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
import socket
from collections.abc import Generator
from typing import Any

import pytest

from shadowcache.cache.backends.memory import MemoryStore
from shadowcache.cache.facade import ShadowCache

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


def is_server_available(port: int, host: str = "localhost") -> bool:
    """Check if a TCP server is listening (memcached, Redis)."""
    try:
        with socket.create_connection((host, port), timeout=1):
            return True
    except OSError:
        return False


memcached_available = pytest.mark.skipif(not is_server_available(11211), reason="memcached server not available")
redis_available = pytest.mark.skipif(not is_server_available(6379), reason="Redis server not available")


class FixedClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FixedClock:
    """A clock frozen at a known timestamp."""
    return FixedClock()


@pytest.fixture
def store(clock: FixedClock) -> MemoryStore:
    """A fresh in-process store sharing the test clock."""
    return MemoryStore(max_size=1000, clock=clock)


@pytest.fixture
def cache(store: MemoryStore, clock: FixedClock) -> ShadowCache:
    """Cache with the key registry enabled."""
    return ShadowCache(store, prefix="test:", lifetime=3600, store_cache_info=True, clock=clock)


@pytest.fixture
def plain_cache(store: MemoryStore, clock: FixedClock) -> ShadowCache:
    """Cache with the key registry disabled."""
    return ShadowCache(store, prefix="plain:", lifetime=3600, clock=clock)


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def mock_env_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for the memory backend."""
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_MAX_SIZE", "100")
    monkeypatch.setenv("CACHE_LIFETIME", "3600")
    monkeypatch.setenv("CACHE_PREFIX", "env:")
    monkeypatch.setenv("CACHE_STORE_CACHE_INFO", "true")


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    """Sample data for cache testing."""
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "simple_false": False,
        "simple_none": None,
        "complex_dict": {
            "nested": {
                "key": "value",
                "number": 123,
                "list": [1, 2, 3],
            }
        },
        "complex_list": [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ],
    }


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Reset the cache factory and loaded config after each test."""
    yield
    from shadowcache.cache.factory import reset_cache_factory
    from shadowcache.config import loader

    reset_cache_factory()
    loader._config_instance = None

"""
shadowcache - Configuration Tests

Environment loading, server list parsing and schema validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from shadowcache.config import (
    CacheBackend,
    CacheConfig,
    ServerConfig,
    get_config,
    load_config,
    parse_servers,
    reload_config,
)
from shadowcache.errors import ConfigurationError


class TestParseServers:
    """Test suite for MEMCACHED_SERVERS parsing."""

    def test_empty(self) -> None:
        assert parse_servers(None) == []
        assert parse_servers("") == []

    def test_host_port_weight(self) -> None:
        """Test every entry form is accepted."""
        assert parse_servers("c1:11211:60, c2:11212 ,c3") == [
            {"host": "c1", "port": 11211, "weight": 60},
            {"host": "c2", "port": 11212},
            {"host": "c3"},
        ]

    @pytest.mark.parametrize("raw", ["c1:port", "c1:11211:heavy", "a:1:2:3"])
    def test_invalid_entries(self, raw: str) -> None:
        """Test malformed entries raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            parse_servers(raw)


class TestCacheConfig:
    """Test suite for the CacheConfig schema."""

    def test_defaults(self) -> None:
        """Test defaults match the memcached driver's."""
        config = CacheConfig()
        assert config.backend == CacheBackend.MEMCACHED
        assert config.lifetime == 86400
        assert config.store_cache_info is False
        assert config.compression is False
        assert config.binary_protocol is False

    def test_fallback_server(self) -> None:
        """Test host/port/weight are used when no servers are listed."""
        config = CacheConfig(host="cache", port=1234, weight=7)
        assert config.resolved_servers() == [ServerConfig(host="cache", port=1234, weight=7)]

    def test_listed_servers_win(self) -> None:
        """Test an explicit server list replaces the fallback."""
        config = CacheConfig(servers=[{"host": "a"}, {"host": "b", "port": 11300}])
        assert [(s.host, s.port) for s in config.resolved_servers()] == [("a", 11211), ("b", 11300)]

    def test_redis_requires_url(self) -> None:
        """Test the redis backend needs a URL."""
        with pytest.raises(ValidationError):
            CacheConfig(backend=CacheBackend.REDIS, redis_url=None)

    def test_negative_lifetime_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CacheConfig(lifetime=-1)

    def test_weight_documented_as_ignored(self) -> None:
        """Test the weight field tells config users it does not affect distribution."""
        description = ServerConfig.model_fields["weight"].description
        assert description is not None
        assert "ignores" in description


class TestLoadConfig:
    """Test suite for environment loading."""

    def test_memory_env(self, mock_env_memory: None) -> None:
        """Test cache settings come from the environment."""
        config = load_config(reload=True)

        assert config.cache.backend == CacheBackend.MEMORY
        assert config.cache.prefix == "env:"
        assert config.cache.lifetime == 3600
        assert config.cache.store_cache_info is True
        assert config.cache.max_size == 100
        assert config.environment == "test"

    def test_memcached_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test memcached options are parsed."""
        monkeypatch.delenv("REDIS_URL", raising=False)
        monkeypatch.delenv("CACHE_BACKEND", raising=False)
        monkeypatch.setenv("MEMCACHED_SERVERS", "m1:11211:70,m2:11211:30")
        monkeypatch.setenv("MEMCACHED_COMPRESSION", "yes")
        monkeypatch.setenv("MEMCACHED_BINARY_PROTOCOL", "1")

        config = load_config(reload=True)
        assert config.cache.backend == CacheBackend.MEMCACHED
        assert [s.host for s in config.cache.servers] == ["m1", "m2"]
        assert config.cache.servers[0].weight == 70
        assert config.cache.compression is True
        assert config.cache.binary_protocol is True

    def test_redis_autodetected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test REDIS_URL selects the redis backend."""
        monkeypatch.delenv("CACHE_BACKEND", raising=False)
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/3")

        config = load_config(reload=True)
        assert config.cache.backend == CacheBackend.REDIS
        assert config.cache.redis_url == "redis://localhost:6379/3"

    def test_invalid_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test bad values surface as ConfigurationError."""
        monkeypatch.setenv("CACHE_LIFETIME", "forever")
        with pytest.raises(ConfigurationError):
            load_config(reload=True)

        monkeypatch.setenv("CACHE_LIFETIME", "60")
        monkeypatch.setenv("CACHE_BACKEND", "floppy")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(reload=True)
        assert "validation_errors" in exc_info.value.details

    def test_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test values are read from a .env file."""
        monkeypatch.delenv("REDIS_URL", raising=False)
        # load_dotenv writes into os.environ; registering the keys lets monkeypatch restore them
        monkeypatch.setenv("CACHE_BACKEND", "memcached")
        monkeypatch.setenv("CACHE_PREFIX", "")
        env_file = tmp_path / ".env"
        env_file.write_text("CACHE_PREFIX=fromfile:\nCACHE_BACKEND=memory\n")

        config = reload_config(env_file=str(env_file))
        assert config.cache.prefix == "fromfile:"
        assert config.cache.backend == CacheBackend.MEMORY

    def test_singleton(self, mock_env_memory: None) -> None:
        """Test get_config() returns the loaded instance."""
        config = load_config(reload=True)
        assert get_config() is config
        assert load_config() is config

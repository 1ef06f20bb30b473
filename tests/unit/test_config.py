"""
Unit tests for ServerConfig.
"""

import pytest

from helloserver.config import ServerConfig


class TestServerConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.keep_alive is True
        assert config.min_workers <= config.max_workers
        config.validate()

    def test_base_url_uses_localhost(self):
        assert ServerConfig().base_url == "http://localhost:8080"
        assert ServerConfig(host="0.0.0.0", port=9000).base_url == "http://localhost:9000"

    def test_port_zero_is_allowed(self):
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs, message", [
        ({"port": -1}, "port"),
        ({"port": 65536}, "port"),
        ({"min_workers": 0}, "min_workers"),
        ({"min_workers": 8, "max_workers": 4}, "max_workers"),
        ({"buffer_size": 512}, "buffer_size"),
        ({"timeout": 0}, "timeout"),
        ({"keep_alive_timeout": -1.0}, "keep_alive_timeout"),
    ])
    def test_invalid_values(self, kwargs, message):
        with pytest.raises(ValueError) as exc_info:
            ServerConfig(**kwargs).validate()

        assert message in str(exc_info.value)

    def test_timeout_none_means_blocking(self):
        ServerConfig(timeout=None).validate()

from dataclasses import FrozenInstanceError

import pytest

from embedded_redis.exceptions import ConfigurationError
from embedded_redis.models import DEFAULT_REDIS_VERSION, ServerConfig


def test_server_config_defaults_to_latest_known_version():
    config = ServerConfig(port=6379)
    assert config.version == DEFAULT_REDIS_VERSION == "2.8.9"
    assert config.password is None
    assert not config.requires_password


@pytest.mark.parametrize("port", [0, -1, 65536, True, "6379"])
def test_server_config_rejects_bad_ports(port):
    with pytest.raises(ConfigurationError):
        ServerConfig(port=port)


def test_server_config_rejects_empty_version():
    with pytest.raises(ConfigurationError):
        ServerConfig(port=6379, version="  ")


def test_server_config_rejects_multiline_password():
    with pytest.raises(ConfigurationError):
        ServerConfig(port=6379, password="a\nb")


def test_server_config_is_immutable():
    config = ServerConfig(port=6379, password="secret")
    assert config.requires_password
    with pytest.raises(FrozenInstanceError):
        config.port = 6380  # type: ignore[misc]

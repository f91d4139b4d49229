import pytest

from modnet_keys.config import DEFAULT_NODE_URL, ZERO_HASH, KeytoolConfig
from modnet_keys.errors import ConfigurationError


def test_defaults():
    config = KeytoolConfig.from_env({})
    assert config.node_url == DEFAULT_NODE_URL
    assert config.network is None
    assert config.genesis_hash == ZERO_HASH
    assert config.log_level == "WARNING"


def test_environment_overrides():
    config = KeytoolConfig.from_env({
        "MODNET_NODE_URL": "http://node:9933",
        "MODNET_NETWORK": "0",
        "MODNET_SPEC_VERSION": "100",
        "MODNET_GENESIS_HASH": "AB" * 32,
        "MODNET_LOG_LEVEL": "debug",
    })
    assert config.node_url == "http://node:9933"
    assert config.network == 0
    assert config.spec_version == 100
    assert config.genesis_hash == "0x" + "ab" * 32
    assert config.genesis_hash_bytes == b"\xab" * 32
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("env", [
    {"MODNET_NETWORK": "not-a-number"},
    {"MODNET_GENESIS_HASH": "0x1234"},
    {"MODNET_LOG_LEVEL": "chatty"},
    {"MODNET_SPEC_VERSION": "-1"},
])
def test_invalid_environment(env):
    with pytest.raises(ConfigurationError):
        KeytoolConfig.from_env(env)


def test_with_overrides_keeps_unset_values():
    config = KeytoolConfig(spec_version=5)
    updated = config.with_overrides(spec_version=None, transaction_version=3)
    assert updated.spec_version == 5
    assert updated.transaction_version == 3
    with pytest.raises(ConfigurationError):
        config.with_overrides(genesis_hash="nope")


@pytest.mark.parametrize("network", [46, 47, -1, 16384])
def test_network_rejects_reserved_and_out_of_range(network):
    with pytest.raises(ConfigurationError):
        KeytoolConfig().with_overrides(network=network)


def test_network_from_environment_rejects_reserved():
    with pytest.raises(ConfigurationError):
        KeytoolConfig.from_env({"MODNET_NETWORK": "46"})

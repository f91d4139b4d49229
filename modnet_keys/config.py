"""Defaults for the key tools, overridable from the environment.

Command-line flags always win over these values; the environment only
replaces the built-in defaults.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_NODE_URL = "http://localhost:9933"
DEFAULT_SS58_FORMAT = 42
RESERVED_SS58_FORMATS = (46, 47)
ZERO_HASH = "0x" + "00" * 32

ENV_PREFIX = "MODNET_"
ENV_FIELDS = {
    "NODE_URL": "node_url",
    "NETWORK": "network",
    "SPEC_VERSION": "spec_version",
    "TX_VERSION": "transaction_version",
    "GENESIS_HASH": "genesis_hash",
    "LOG_LEVEL": "log_level",
}


class KeytoolConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_url: str = Field(default=DEFAULT_NODE_URL, description="Node JSON-RPC endpoint")
    network: Optional[int] = Field(default=None, ge=0, le=16383, description="SS58 address format override")
    spec_version: int = Field(default=1, ge=0, lt=2**32, description="Runtime spec version")
    transaction_version: int = Field(default=1, ge=0, lt=2**32, description="Runtime transaction version")
    genesis_hash: str = Field(default=ZERO_HASH, description="0x-prefixed genesis block hash")
    log_level: str = Field(default="WARNING", description="Log level for stderr diagnostics")

    @field_validator("network")
    @classmethod
    def _validate_network(cls, value: Optional[int]) -> Optional[int]:
        if value in RESERVED_SS58_FORMATS:
            raise ValueError(f"SS58 format {value} is reserved")
        return value

    @field_validator("genesis_hash")
    @classmethod
    def _validate_genesis_hash(cls, value: str) -> str:
        body = value[2:] if value.startswith("0x") else value
        try:
            raw = bytes.fromhex(body)
        except ValueError as e:
            raise ValueError(f"genesis_hash is not hex: {e}") from e
        if len(raw) != 32:
            raise ValueError("genesis_hash must be 32 bytes")
        return "0x" + raw.hex()

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def genesis_hash_bytes(self) -> bytes:
        return bytes.fromhex(self.genesis_hash[2:])

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KeytoolConfig":
        """Build a config from ``MODNET_*`` environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for suffix, field_name in ENV_FIELDS.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def with_overrides(self, **overrides) -> "KeytoolConfig":
        """Return a validated copy; ``None`` values keep the current setting."""
        values = self.model_dump()
        values.update({name: value for name, value in overrides.items() if value is not None})
        try:
            return type(self)(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

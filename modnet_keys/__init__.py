"""Modnet key tools: derive, inspect, sign and insert substrate keys."""

from .account import AccountReport, OutputType, inspect_uri, print_from_uri
from .config import KeytoolConfig
from .errors import (
    CallDecodeError,
    InvalidHex,
    InvalidKeyMaterial,
    InvalidKeyType,
    KeytoolError,
    MissingPassword,
    PayloadConstructionError,
    TransportError,
)
from .extrinsic import NodeTemplateAdapter, RuntimeAdapter, create_extrinsic_for, sign_transaction
from .keys import KeyPair, derive, pair_from_suri, read_uri, secret_scope
from .rpc import KeystoreClient, validate_key_type
from .schemes import CryptoScheme, get_scheme, with_crypto_scheme

__version__ = "0.1.0"

__all__ = [
    "AccountReport",
    "OutputType",
    "inspect_uri",
    "print_from_uri",
    "KeytoolConfig",
    "CallDecodeError",
    "InvalidHex",
    "InvalidKeyMaterial",
    "InvalidKeyType",
    "KeytoolError",
    "MissingPassword",
    "PayloadConstructionError",
    "TransportError",
    "NodeTemplateAdapter",
    "RuntimeAdapter",
    "create_extrinsic_for",
    "sign_transaction",
    "KeyPair",
    "derive",
    "pair_from_suri",
    "read_uri",
    "secret_scope",
    "KeystoreClient",
    "validate_key_type",
    "CryptoScheme",
    "get_scheme",
    "with_crypto_scheme",
]

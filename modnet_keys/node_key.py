"""Network (libp2p) node keys."""

import secrets
from typing import Tuple

import base58
import ed25519_zebra

# protobuf PublicKey { Type = Ed25519, Data = <32 bytes> }
_ED25519_PROTOBUF_PREFIX = bytes([0x08, 0x01, 0x12, 0x20])
_IDENTITY_MULTIHASH = 0x00


def peer_id_from_public(public: bytes) -> str:
    """Base58 peer id: identity multihash of the protobuf-encoded public key."""
    encoded = _ED25519_PROTOBUF_PREFIX + bytes(public)
    return base58.b58encode(bytes([_IDENTITY_MULTIHASH, len(encoded)]) + encoded).decode()


def generate_node_key() -> Tuple[bytes, str]:
    """Return a fresh ed25519 secret and its peer id."""
    secret = secrets.token_bytes(32)
    _, public = ed25519_zebra.ed_from_seed(secret)
    return secret, peer_id_from_public(bytes(public))

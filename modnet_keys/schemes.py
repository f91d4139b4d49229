"""Signature schemes and the runtime switch that selects one per command.

Each scheme works on raw key material (public key, secret key, optional
seed) so the rest of the package can stay scheme-agnostic: commands pick a
:class:`CryptoSchemeImpl` once with :func:`get_scheme` or
:func:`with_crypto_scheme` and pass it along as an ordinary value.
"""

from enum import Enum
from hashlib import blake2b
from typing import Callable, Optional, Tuple, TypeVar

import ed25519_zebra
import sr25519
from eth_keys import keys as eth_keys
from eth_keys.exceptions import ValidationError
from substrateinterface.utils.ss58 import ss58_encode

from . import codec
from .config import DEFAULT_SS58_FORMAT
from .errors import InvalidKeyMaterial, UnsupportedDerivation

__all__ = [
    "CryptoScheme",
    "CryptoSchemeImpl",
    "Sr25519Scheme",
    "Ed25519Scheme",
    "EcdsaScheme",
    "get_scheme",
    "with_crypto_scheme",
    "blake2_256",
]

ACCOUNT_ID_LENGTH = 32
SEED_LENGTH = 32

T = TypeVar("T")

# (public key, secret key, seed)
Material = Tuple[bytes, bytes, Optional[bytes]]


def blake2_256(data: bytes) -> bytes:
    hasher = blake2b(digest_size=32)
    hasher.update(data)
    return hasher.digest()


class CryptoScheme(str, Enum):
    """The signature schemes selectable with ``--scheme``."""

    ECDSA = "ecdsa"
    SR25519 = "sr25519"
    ED25519 = "ed25519"

    def __str__(self) -> str:
        return self.value


class CryptoSchemeImpl:
    """Key pair capability shared by all schemes."""

    name: str = ""
    public_key_length: int = 32
    signature_length: int = 64
    supports_soft_derivation: bool = False
    deterministic_signatures: bool = True
    default_network: int = DEFAULT_SS58_FORMAT

    def pair_from_seed(self, seed: bytes) -> Material:
        raise NotImplementedError

    def sign(self, public: bytes, secret: bytes, message: bytes) -> bytes:
        raise NotImplementedError

    def hard_derive(self, material: Material, chain_code: bytes) -> Material:
        raise NotImplementedError

    def soft_derive(self, material: Material, chain_code: bytes) -> Material:
        raise UnsupportedDerivation(f"Soft key derivation is not supported by {self.name}")

    def account_id(self, public: bytes) -> bytes:
        """Map a public key onto its 32-byte account identifier."""
        if len(public) > ACCOUNT_ID_LENGTH:
            return blake2_256(public)
        return bytes(public)

    def to_address(self, public: bytes, network: Optional[int] = None) -> str:
        ss58_format = self.default_network if network is None else network
        return ss58_encode(self.account_id(public), ss58_format=ss58_format)

    def _check_seed(self, seed: bytes) -> bytes:
        if len(seed) != SEED_LENGTH:
            raise InvalidKeyMaterial(f"Invalid seed length for {self.name}: expected {SEED_LENGTH} bytes")
        return bytes(seed)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class Sr25519Scheme(CryptoSchemeImpl):
    """Schnorrkel on Ristretto25519. Signing is randomized."""

    name = "sr25519"
    supports_soft_derivation = True
    deterministic_signatures = False

    def pair_from_seed(self, seed: bytes) -> Material:
        public, secret = sr25519.pair_from_seed(self._check_seed(seed))
        return bytes(public), bytes(secret), bytes(seed)

    def sign(self, public: bytes, secret: bytes, message: bytes) -> bytes:
        return bytes(sr25519.sign((bytes(public), bytes(secret)), message))

    def hard_derive(self, material: Material, chain_code: bytes) -> Material:
        public, secret, _ = material
        _, child_public, child_secret = sr25519.hard_derive_keypair((chain_code, bytes(public), bytes(secret)), b"")
        # the bindings do not expose the derived mini secret
        return bytes(child_public), bytes(child_secret), None

    def soft_derive(self, material: Material, chain_code: bytes) -> Material:
        public, secret, _ = material
        _, child_public, child_secret = sr25519.derive_keypair((chain_code, bytes(public), bytes(secret)), b"")
        return bytes(child_public), bytes(child_secret), None


class _SeedDerivedScheme(CryptoSchemeImpl):
    """Schemes whose hard junctions re-hash the seed with a tag."""

    hdkd_tag = b""

    def hard_derive(self, material: Material, chain_code: bytes) -> Material:
        seed = material[2]
        if seed is None:
            raise UnsupportedDerivation(f"Hard derivation on {self.name} needs the seed")
        child_seed = blake2_256(codec.encode("Bytes", self.hdkd_tag) + bytes(seed) + bytes(chain_code))
        return self.pair_from_seed(child_seed)


class Ed25519Scheme(_SeedDerivedScheme):
    """Ed25519 with hard derivation only."""

    name = "ed25519"
    hdkd_tag = b"Ed25519HDKD"

    def pair_from_seed(self, seed: bytes) -> Material:
        secret, public = ed25519_zebra.ed_from_seed(self._check_seed(seed))
        return bytes(public), bytes(secret), bytes(seed)

    def sign(self, public: bytes, secret: bytes, message: bytes) -> bytes:
        return bytes(ed25519_zebra.ed_sign(bytes(secret), message))


class EcdsaScheme(_SeedDerivedScheme):
    """secp256k1 ECDSA over blake2_256 digests, 65-byte recoverable signatures."""

    name = "ecdsa"
    public_key_length = 33
    signature_length = 65
    hdkd_tag = b"Secp256k1HDKD"

    def pair_from_seed(self, seed: bytes) -> Material:
        seed = self._check_seed(seed)
        try:
            private_key = eth_keys.PrivateKey(seed)
        except ValidationError as e:
            raise InvalidKeyMaterial(f"Seed is not a valid secp256k1 secret: {e}") from e
        return private_key.public_key.to_compressed_bytes(), seed, seed

    def sign(self, public: bytes, secret: bytes, message: bytes) -> bytes:
        signature = eth_keys.PrivateKey(bytes(secret)).sign_msg_hash(blake2_256(message))
        return signature.to_bytes()


_SCHEMES = {
    CryptoScheme.ECDSA: EcdsaScheme(),
    CryptoScheme.SR25519: Sr25519Scheme(),
    CryptoScheme.ED25519: Ed25519Scheme(),
}


def get_scheme(scheme) -> CryptoSchemeImpl:
    """Return the implementation for a scheme name or :class:`CryptoScheme`."""
    if scheme == CryptoScheme.ECDSA:
        return _SCHEMES[CryptoScheme.ECDSA]
    elif scheme == CryptoScheme.SR25519:
        return _SCHEMES[CryptoScheme.SR25519]
    elif scheme == CryptoScheme.ED25519:
        return _SCHEMES[CryptoScheme.ED25519]
    # the CLI restricts --scheme to the enum, anything else is a bug
    raise ValueError(f"Unknown crypto scheme {scheme!r}")


def with_crypto_scheme(scheme, operation: Callable[..., T], *args, **kwargs) -> T:
    """Call ``operation(impl, *args, **kwargs)`` bound to the selected scheme."""
    return operation(get_scheme(scheme), *args, **kwargs)

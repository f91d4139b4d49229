"""Key pairs and secret URI derivation.

A secret URI (SURI) is ``<phrase or 0x seed>`` followed by any number of
``/soft`` or ``//hard`` junctions and an optional ``///password``. An empty
phrase stands for the well-known development phrase, so ``//Alice`` works.

Nothing in this module logs or stores its inputs. Key pairs hold their
secret in mutable buffers that :meth:`KeyPair.wipe` zeroes; commands acquire
pairs through :func:`secret_scope` so the wipe runs on every exit path.
"""

import os
import re
from contextlib import contextmanager
from getpass import getpass
from typing import Iterator, Optional, Tuple, Union

from bip39 import bip39_generate, bip39_to_mini_secret, bip39_validate
from pydantic import BaseModel, ConfigDict
from substrateinterface.key import extract_derive_path
from substrateinterface.utils.ss58 import get_ss58_format, ss58_decode

from .errors import FileAccessError, InvalidKeyMaterial, KeytoolError, MissingPassword, UnsupportedDerivation
from .schemes import CryptoSchemeImpl

__all__ = [
    "DEV_PHRASE",
    "KeyPair",
    "DerivedPair",
    "DerivedPublic",
    "secret_scope",
    "from_phrase",
    "from_string_with_seed",
    "public_from_string",
    "derive",
    "pair_from_suri",
    "read_uri",
    "get_password",
    "generate_mnemonic",
]

DEV_PHRASE = "bottom drive obey lake curtain smoke basket hold race lonely fit walk"
MNEMONIC_LANGUAGE = "en"
MNEMONIC_WORD_COUNTS = (12, 15, 18, 21, 24)

SURI_REGEX = re.compile(r"^(?P<phrase>[\w ]+)?(?P<path>(//?[^/]+)*)(///(?P<password>.*))?$")


class KeyPair:
    """A secret key bound to one scheme."""

    def __init__(self, scheme: CryptoSchemeImpl, public: bytes, secret: bytes, seed: Optional[bytes] = None):
        self.scheme = scheme
        self._public = bytes(public)
        self._secret: Optional[bytearray] = bytearray(secret)
        self._seed: Optional[bytearray] = bytearray(seed) if seed is not None else None

    @classmethod
    def from_seed(cls, scheme: CryptoSchemeImpl, seed: bytes) -> "KeyPair":
        """Build the root pair for a 32-byte seed."""
        public, secret, seed = scheme.pair_from_seed(seed)
        return cls(scheme, public, secret, seed)

    def public(self) -> bytes:
        """Raw public key bytes (33 for ecdsa, 32 otherwise)."""
        return self._public

    @property
    def seed(self) -> Optional[bytes]:
        """The seed, or None once derivation has hidden it or the pair was wiped."""
        return bytes(self._seed) if self._seed is not None else None

    @property
    def is_wiped(self) -> bool:
        return self._secret is None

    def sign(self, message: bytes) -> bytes:
        """Sign ``message`` with the scheme of this pair; fails after :meth:`wipe`."""
        if self._secret is None:
            raise KeytoolError("Key pair has already been released")
        return self.scheme.sign(self._public, bytes(self._secret), bytes(message))

    def account_id(self) -> bytes:
        """32-byte account id of the public key."""
        return self.scheme.account_id(self._public)

    def to_address(self, network: Optional[int] = None) -> str:
        """SS58 address; ``network`` defaults to the generic substrate format."""
        return self.scheme.to_address(self._public, network)

    def derive(self, path: str) -> "KeyPair":
        """Follow ``/soft`` and ``//hard`` junctions from this pair."""
        try:
            junctions = extract_derive_path(path)
        except ValueError as e:
            raise InvalidKeyMaterial(f"Invalid derivation path: {e}") from e
        material = (self._public, bytes(self._secret), self.seed)
        for junction in junctions:
            if junction.is_hard:
                material = self.scheme.hard_derive(material, junction.chain_code)
            elif self.scheme.supports_soft_derivation:
                material = self.scheme.soft_derive(material, junction.chain_code)
            else:
                raise UnsupportedDerivation(f"Soft key derivation is not supported by {self.scheme.name}")
        return KeyPair(self.scheme, *material)

    def wipe(self) -> None:
        """Zero and drop the secret buffers."""
        for buf in (self._secret, self._seed):
            if buf is not None:
                buf[:] = bytes(len(buf))
        self._secret = None
        self._seed = None

    def __repr__(self) -> str:
        return f"KeyPair(scheme={self.scheme.name}, public=0x{self._public.hex()})"


class DerivedPair(BaseModel):
    """A pair recovered from a phrase or secret URI."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    pair: KeyPair
    seed: Optional[bytes] = None
    from_phrase: bool = False

    def public(self) -> bytes:
        return self.pair.public()


class DerivedPublic(BaseModel):
    """A bare public key parsed from an address string."""

    model_config = ConfigDict(frozen=True)

    public_key: bytes
    network: int

    def public(self) -> bytes:
        return self.public_key


@contextmanager
def secret_scope(derived: Union[KeyPair, DerivedPair, DerivedPublic]) -> Iterator:
    """Yield ``derived`` and release its secret when the block exits."""
    try:
        yield derived
    finally:
        if isinstance(derived, KeyPair):
            derived.wipe()
        elif isinstance(derived, DerivedPair):
            derived.pair.wipe()


def _mini_secret(phrase: str, password: Optional[str]) -> bytes:
    if not bip39_validate(phrase, MNEMONIC_LANGUAGE):
        raise InvalidKeyMaterial("Invalid mnemonic phrase")
    try:
        return bytes(bip39_to_mini_secret(phrase, password or "", MNEMONIC_LANGUAGE))
    except ValueError as e:
        raise InvalidKeyMaterial(f"Invalid mnemonic phrase: {e}") from e


def from_phrase(scheme: CryptoSchemeImpl, phrase: str, password: Optional[str] = None) -> Tuple[KeyPair, bytes]:
    """Recover a pair and its seed from a bare BIP39 mnemonic."""
    seed = _mini_secret(phrase, password)
    pair = KeyPair.from_seed(scheme, seed)
    return pair, seed


def from_string_with_seed(
    scheme: CryptoSchemeImpl, suri: str, password: Optional[str] = None
) -> Tuple[KeyPair, Optional[bytes]]:
    """Recover a pair from a full secret URI.

    A given ``password``, even an empty one, overrides one embedded after
    ``///``. The seed is returned when the scheme can still expose it after
    derivation.
    """
    match = SURI_REGEX.match(suri)
    if match is None:
        raise InvalidKeyMaterial()
    phrase = (match.group("phrase") or DEV_PHRASE).strip()
    path = match.group("path") or ""
    if password is None:
        password = match.group("password")

    if phrase.startswith("0x"):
        try:
            seed = bytes.fromhex(phrase[2:])
        except ValueError as e:
            raise InvalidKeyMaterial(f"Invalid seed: {e}") from e
        root = KeyPair.from_seed(scheme, seed)
    else:
        root, _ = from_phrase(scheme, phrase, password)

    if not path:
        return root, root.seed
    try:
        derived = root.derive(path)
    finally:
        root.wipe()
    return derived, derived.seed


def public_from_string(scheme: CryptoSchemeImpl, value: str) -> Tuple[bytes, int]:
    """Parse an SS58 address into its public key and network identifier."""
    if value.startswith("0x") or "/" in value or " " in value:
        raise InvalidKeyMaterial("Not an SS58 address")
    try:
        public = bytes.fromhex(ss58_decode(value))
        network = get_ss58_format(value)
    except (ValueError, IndexError) as e:
        raise InvalidKeyMaterial(f"Invalid SS58 address: {e}") from e
    if len(public) != scheme.public_key_length:
        raise InvalidKeyMaterial(f"Public key length does not match {scheme.name}")
    return public, network


def derive(scheme: CryptoSchemeImpl, uri: str, password: Optional[str] = None) -> Union[DerivedPair, DerivedPublic]:
    """Interpret ``uri`` as a phrase, then a secret URI, then a public address."""
    try:
        pair, seed = from_phrase(scheme, uri, password)
        return DerivedPair(pair=pair, seed=seed, from_phrase=True)
    except InvalidKeyMaterial:
        pass
    try:
        pair, seed = from_string_with_seed(scheme, uri, password)
        return DerivedPair(pair=pair, seed=seed)
    except InvalidKeyMaterial:
        pass
    try:
        public, network = public_from_string(scheme, uri)
        return DerivedPublic(public_key=public, network=network)
    except InvalidKeyMaterial:
        pass
    raise InvalidKeyMaterial()


def pair_from_suri(scheme: CryptoSchemeImpl, suri: str, password: Optional[str] = None) -> KeyPair:
    """Recover a signing pair; public-only inputs are rejected."""
    try:
        pair, _ = from_string_with_seed(scheme, suri, password)
    except InvalidKeyMaterial as e:
        raise InvalidKeyMaterial(f"Invalid phrase: {e}") from e
    return pair


def read_uri(uri: Optional[str]) -> str:
    """Use the file contents when ``uri`` names a file, otherwise ``uri`` itself.

    Without a value the URI is read from the terminal without echo.
    """
    if uri is None:
        return getpass("URI: ")
    if os.path.isfile(uri):
        try:
            with open(uri, "r", encoding="utf-8") as file:
                return file.read().rstrip()
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(f"Cannot read URI from {uri}: {e}") from e
    return uri


def get_password(password: Optional[str], interactive: bool = False, required: bool = True) -> Optional[str]:
    """Resolve the key password: prompt when ``interactive``, else use ``password``.

    Raises :class:`MissingPassword` when ``required`` and nothing was given.
    """
    if interactive:
        return getpass("Key password: ")
    if password is None and required:
        raise MissingPassword()
    return password


def generate_mnemonic(words: int = 12) -> str:
    """Return a fresh English BIP39 mnemonic of 12, 15, 18, 21 or 24 words."""
    if words not in MNEMONIC_WORD_COUNTS:
        raise InvalidKeyMaterial(f"Invalid number of words given for phrase: must be one of {MNEMONIC_WORD_COUNTS}")
    return bip39_generate(words, MNEMONIC_LANGUAGE)

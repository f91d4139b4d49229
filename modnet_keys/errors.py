"""Error hierarchy for the key tools.

Every error a command can surface derives from :class:`KeytoolError`; the CLI
turns those into a one-line ``Error: ...`` diagnostic and a non-zero exit.
Messages never carry secret material.
"""

from typing import Optional

__all__ = [
    "KeytoolError",
    "ConfigurationError",
    "InvalidKeyMaterial",
    "UnsupportedDerivation",
    "InvalidKeyType",
    "InvalidHex",
    "InvalidNonce",
    "CallDecodeError",
    "PayloadConstructionError",
    "MissingPassword",
    "FileAccessError",
    "TransportError",
]


class KeytoolError(Exception):
    """Base exception for all key tool errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(KeytoolError):
    """Raised when configuration values are invalid."""


class InvalidKeyMaterial(KeytoolError):
    """Raised when a phrase, seed, URI or public key cannot be interpreted."""

    def __init__(self, message: str = "Invalid phrase/URI given") -> None:
        super().__init__(message)


class UnsupportedDerivation(InvalidKeyMaterial):
    """Raised when a scheme cannot follow a derivation junction."""


class InvalidKeyType(KeytoolError):
    """Raised when a keystore key type is not a 4-character identifier."""

    def __init__(self, key_type: str) -> None:
        super().__init__(
            f"Cannot convert argument to keytype: {key_type!r} should be 4-character string"
        )
        self.key_type = key_type


class InvalidHex(KeytoolError):
    """Raised when hex decoding fails."""


class InvalidNonce(KeytoolError):
    """Raised when a nonce is not an unsigned decimal integer in range."""


class CallDecodeError(KeytoolError):
    """Raised when call bytes do not match the runtime call shape."""


class PayloadConstructionError(KeytoolError):
    """Raised when the signed payload cannot be built from call and extra."""


class MissingPassword(KeytoolError):
    """Raised when a password is required but none was supplied."""

    def __init__(self, message: str = "Password not specified") -> None:
        super().__init__(message)


class TransportError(KeytoolError):
    """Raised when the RPC endpoint cannot be reached or answers with an error."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        if self.code is not None:
            return f"[{self.code}] {self.message}"
        return self.message


class FileAccessError(KeytoolError):
    """Raised when a key file cannot be read or written."""

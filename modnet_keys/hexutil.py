"""Hex helpers and message input."""

import binascii
import sys
from typing import BinaryIO, Optional, Union

from .errors import InvalidHex


def decode_hex(value: Union[str, bytes, bytearray]) -> bytes:
    """Decode hex with an optional ``0x`` prefix; the prefix is never part of the result."""
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidHex(f"Invalid hex ({e})") from e
    value = value.strip()
    if value[:2] in ("0x", "0X"):
        value = value[2:]
    try:
        return binascii.unhexlify(value)
    except (binascii.Error, ValueError) as e:
        raise InvalidHex(f"Invalid hex ({e})") from e


def encode_hex(data: Union[bytes, bytearray]) -> str:
    """Lowercase hex with a ``0x`` prefix."""
    return "0x" + bytes(data).hex()


def read_message(msg: Optional[str], should_decode: bool, stdin: Optional[BinaryIO] = None) -> bytes:
    """Return the message to sign.

    A given ``msg`` is taken literally, or hex-decoded when ``should_decode``.
    Without one, all of stdin is read as raw bytes and decoded the same way.
    """
    if msg is not None:
        return decode_hex(msg) if should_decode else msg.encode("utf-8")
    stream = stdin if stdin is not None else sys.stdin.buffer
    message = stream.read()
    if should_decode:
        message = decode_hex(message)
    return bytes(message)

"""Signed transaction (extrinsic) construction.

The runtime-specific parts, call decoding and the nonce-derived transaction
extra, come from a :class:`RuntimeAdapter`. Everything else is scheme and
runtime agnostic:

1. decode the call bytes through the adapter
2. build the transaction extra from the nonce
3. build the signed payload ``call ++ extra ++ additional_signed``
4. sign the payload (its blake2_256 digest when longer than 256 bytes)
5. derive the signer's account id
6. encode ``Compact<u32>(len) ++ 0x84 ++ account_id ++ signature ++ extra ++ call``
"""

import logging
from typing import Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from . import codec
from .config import KeytoolConfig
from .errors import CallDecodeError, InvalidNonce, PayloadConstructionError
from .keys import KeyPair
from .schemes import blake2_256

logger = logging.getLogger(__name__)

EXTRINSIC_FORMAT_VERSION = 4
SIGNED_FLAG = 0b1000_0000
MAX_UNHASHED_PAYLOAD = 256
IMMORTAL_ERA = b"\x00"

T = TypeVar("T")


class Call(BaseModel):
    """A runtime call: pallet index, call index and the already-encoded arguments."""

    model_config = ConfigDict(frozen=True)

    pallet_index: int = Field(ge=0, le=255)
    call_index: int = Field(ge=0, le=255)
    args: bytes = b""

    def encode(self) -> bytes:
        return codec.encode("u8", self.pallet_index) + codec.encode("u8", self.call_index) + self.args


class TransactionExtra(BaseModel):
    """Signed extensions carried in the extrinsic: mortality, nonce and tip."""

    model_config = ConfigDict(frozen=True)

    era: bytes = IMMORTAL_ERA
    nonce: int = Field(ge=0)
    tip: int = Field(default=0, ge=0)

    def encode(self) -> bytes:
        return self.era + codec.compact(self.nonce) + codec.compact(self.tip)


class RuntimeAdapter:
    """Runtime-specific hooks used while building an extrinsic."""

    max_nonce: int = 2**32 - 1

    def parse_nonce(self, text: str) -> int:
        text = text.strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidNonce(f"Invalid nonce {text!r}: expected an unsigned decimal integer")
        nonce = int(text)
        if nonce > self.max_nonce:
            raise InvalidNonce(f"Nonce {nonce} does not fit the runtime index type")
        return nonce

    def decode_call(self, data: bytes) -> Call:
        raise NotImplementedError

    def build_extra(self, nonce: int) -> TransactionExtra:
        raise NotImplementedError

    def additional_signed(self, extra: TransactionExtra) -> bytes:
        raise NotImplementedError


class NodeTemplateAdapter(RuntimeAdapter):
    """Adapter for runtimes with the node-template signed extensions.

    Transactions are immortal, carry no tip, and commit to spec version,
    transaction version and the genesis hash (twice, as the immortal era's
    checkpoint block is genesis).
    """

    def __init__(self, config: KeytoolConfig):
        self.config = config

    def decode_call(self, data: bytes) -> Call:
        if len(data) < 2:
            raise CallDecodeError(f"Call needs at least a pallet and a call index, got {len(data)} bytes")
        stream = codec.ScaleBytes(bytearray(data))
        pallet_index = codec.decode("u8", stream)
        call_index = codec.decode("u8", stream)
        return Call(pallet_index=pallet_index, call_index=call_index, args=bytes(data[2:]))

    def build_extra(self, nonce: int) -> TransactionExtra:
        return TransactionExtra(nonce=nonce)

    def additional_signed(self, extra: TransactionExtra) -> bytes:
        if extra.era != IMMORTAL_ERA:
            raise PayloadConstructionError("Mortal transactions need a checkpoint block hash")
        genesis = self.config.genesis_hash_bytes
        return (
            codec.encode("u32", self.config.spec_version)
            + codec.encode("u32", self.config.transaction_version)
            + genesis
            + genesis
        )


class SignedPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    call: Call
    extra: TransactionExtra
    additional_signed: bytes

    @classmethod
    def new(cls, adapter: RuntimeAdapter, call: Call, extra: TransactionExtra) -> "SignedPayload":
        try:
            additional = adapter.additional_signed(extra)
        except PayloadConstructionError:
            raise
        except Exception as e:
            raise PayloadConstructionError(f"Transaction validity error: {e}") from e
        return cls(call=call, extra=extra, additional_signed=additional)

    def encode(self) -> bytes:
        return self.call.encode() + self.extra.encode() + self.additional_signed

    def using_encoded(self, fn: Callable[[bytes], T]) -> T:
        """Call ``fn`` on the bytes that get signed."""
        encoded = self.encode()
        if len(encoded) > MAX_UNHASHED_PAYLOAD:
            return fn(blake2_256(encoded))
        return fn(encoded)


class UncheckedExtrinsic(BaseModel):
    model_config = ConfigDict(frozen=True)

    signer: bytes
    signature: bytes
    call: Call
    extra: TransactionExtra

    def encode(self) -> bytes:
        body = (
            bytes([SIGNED_FLAG | EXTRINSIC_FORMAT_VERSION])
            + self.signer
            + self.signature
            + self.extra.encode()
            + self.call.encode()
        )
        return codec.encode("Compact<u32>", len(body)) + body


def create_extrinsic_for(adapter: RuntimeAdapter, call: Call, nonce: int, signer: KeyPair) -> UncheckedExtrinsic:
    extra = adapter.build_extra(nonce)
    payload = SignedPayload.new(adapter, call, extra)
    signature = payload.using_encoded(signer.sign)
    account = signer.account_id()
    logger.debug("Signed %d-byte call for account 0x%s", len(call.encode()), account.hex())
    return UncheckedExtrinsic(signer=account, signature=signature, call=payload.call, extra=payload.extra)


def sign_transaction(adapter: RuntimeAdapter, call_data: bytes, nonce: int, signer: KeyPair) -> bytes:
    """Decode ``call_data``, sign it with ``signer`` and return the encoded extrinsic."""
    call = adapter.decode_call(call_data)
    return create_extrinsic_for(adapter, call, nonce, signer).encode()

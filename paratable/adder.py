"""A minimal parachain whose state is a counter that gets added to.

Heads, block bodies and messages use a fixed little-endian binary layout:
unsigned 64-bit integers take 8 bytes and hashes take 32 raw bytes.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable

from Crypto.Hash import keccak

__all__ = [
    "HeadData",
    "BlockData",
    "AddMessage",
    "StateMismatch",
    "keccak256",
    "hash_state",
    "process_messages",
    "execute",
    "validate_block",
]

_U64 = struct.Struct("<Q")
_U64_MASK = (1 << 64) - 1
HASH_LEN = 32


def _check_u64(name: str, value: int) -> None:
    if not isinstance(value, int) or not 0 <= value <= _U64_MASK:
        raise ValueError(f"{name} must be an unsigned 64-bit integer, got {value!r}")


def _check_hash(name: str, value: bytes) -> bytes:
    value = bytes(value)
    if len(value) != HASH_LEN:
        raise ValueError(f"{name} must be {HASH_LEN} bytes, got {len(value)}")
    return value


def _read_u64(data: bytes, offset: int) -> int:
    return _U64.unpack_from(data, offset)[0]


def keccak256(data: bytes) -> bytes:
    """Return the Keccak-256 digest of ``data``."""
    return keccak.new(data=bytes(data), digest_bits=256).digest()


class StateMismatch(Exception):
    """The block's start state does not match the parent head's state hash."""


@dataclass(frozen=True)
class HeadData:
    """Head data of the adder parachain."""

    number: int = 0
    parent_hash: bytes = bytes(HASH_LEN)
    post_state: bytes = bytes(HASH_LEN)

    ENCODED_LEN = 8 + 2 * HASH_LEN

    def __post_init__(self) -> None:
        _check_u64("number", self.number)
        object.__setattr__(self, "parent_hash", _check_hash("parent_hash", self.parent_hash))
        object.__setattr__(self, "post_state", _check_hash("post_state", self.post_state))

    def encode(self) -> bytes:
        """Serialise the head to its binary form."""
        return _U64.pack(self.number) + self.parent_hash + self.post_state

    @classmethod
    def decode(cls, data: bytes) -> "HeadData":
        """Read a head from the start of ``data``; trailing bytes are ignored."""
        data = bytes(data)
        if len(data) < cls.ENCODED_LEN:
            raise ValueError("not enough bytes for head data")
        return cls(
            number=_read_u64(data, 0),
            parent_hash=data[8 : 8 + HASH_LEN],
            post_state=data[8 + HASH_LEN : cls.ENCODED_LEN],
        )

    def hash(self) -> bytes:
        """Keccak-256 of the encoded head."""
        return keccak256(self.encode())


@dataclass(frozen=True)
class BlockData:
    """Block body: the state to start from and the amount to add."""

    state: int = 0
    add: int = 0

    ENCODED_LEN = 16

    def __post_init__(self) -> None:
        _check_u64("state", self.state)
        _check_u64("add", self.add)

    def encode(self) -> bytes:
        return _U64.pack(self.state) + _U64.pack(self.add)

    @classmethod
    def decode(cls, data: bytes) -> "BlockData":
        data = bytes(data)
        if len(data) < cls.ENCODED_LEN:
            raise ValueError("not enough bytes for block data")
        return cls(state=_read_u64(data, 0), add=_read_u64(data, 8))


@dataclass(frozen=True)
class AddMessage:
    """Incoming message asking the parachain to add ``amount``."""

    amount: int = 0

    ENCODED_LEN = 8

    def __post_init__(self) -> None:
        _check_u64("amount", self.amount)

    def encode(self) -> bytes:
        return _U64.pack(self.amount)

    @classmethod
    def decode(cls, data: bytes) -> "AddMessage":
        data = bytes(data)
        if len(data) < cls.ENCODED_LEN:
            raise ValueError("not enough bytes for an add message")
        return cls(amount=_read_u64(data, 0))


def hash_state(state: int) -> bytes:
    """Keccak-256 of the encoded 64-bit state."""
    _check_u64("state", state)
    return keccak256(_U64.pack(state))


def process_messages(messages: Iterable[bytes]) -> int:
    """Sum the amounts of all decodable messages, wrapping at 2**64.

    Messages that cannot be decoded are ignored.
    """
    total = 0
    for data in messages:
        try:
            message = AddMessage.decode(data)
        except ValueError:
            continue
        total = (total + message.amount) & _U64_MASK
    return total


def execute(
    parent_hash: bytes,
    parent_head: HeadData,
    block_data: BlockData,
    from_messages: int,
) -> HeadData:
    """Apply a block on top of ``parent_head`` and return the new head.

    Raises StateMismatch when the block's start state does not hash to the
    parent's post-state.
    """
    if hash_state(block_data.state) != parent_head.post_state:
        raise StateMismatch("block start state does not match parent post-state")
    if parent_head.number == _U64_MASK:
        raise OverflowError("block number overflow")

    new_state = (block_data.state + block_data.add + from_messages) & _U64_MASK
    return HeadData(
        number=parent_head.number + 1,
        parent_hash=parent_hash,
        post_state=hash_state(new_state),
    )


def validate_block(parent_head: bytes, block_data: bytes, ingress: Iterable[bytes]) -> bytes:
    """Validate encoded block data against an encoded parent head.

    Returns the encoded new head. Raises ValueError on malformed input and
    StateMismatch when execution fails.
    """
    try:
        head = HeadData.decode(parent_head)
    except ValueError as exc:
        raise ValueError("invalid parent head format") from exc
    try:
        body = BlockData.decode(block_data)
    except ValueError as exc:
        raise ValueError("invalid block data format") from exc

    parent_hash = keccak256(parent_head)
    from_messages = process_messages(ingress)
    return execute(parent_hash, head, body, from_messages).encode()
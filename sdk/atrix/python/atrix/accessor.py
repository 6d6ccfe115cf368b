"""Single-field reads from raw account data.

Reading one well-known field (a token balance at offset 64, a mint at
offset 0) avoids decoding the whole account.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from atrix.errors import OutOfBoundsError

# SPL token account offsets.
TOKEN_ACCOUNT_MINT_OFFSET = 0
TOKEN_ACCOUNT_OWNER_OFFSET = 32
TOKEN_ACCOUNT_AMOUNT_OFFSET = 64


class FieldKind(Enum):
    BOOL = "bool"
    U8 = "u8"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    PUBKEY = "pubkey"

    @property
    def width(self) -> int:
        return _WIDTHS[self]


_WIDTHS = {
    FieldKind.BOOL: 1,
    FieldKind.U8: 1,
    FieldKind.U32: 4,
    FieldKind.U64: 8,
    FieldKind.U128: 16,
    FieldKind.PUBKEY: 32,
}


def _account_bytes(account: Any) -> bytes:
    # Accept raw bytes or anything carrying them in .data (solders Account).
    if isinstance(account, (bytes, bytearray, memoryview)):
        return bytes(account)
    return bytes(account.data)


def read_field(account: Any, kind: FieldKind, offset: int) -> bytes:
    """Copy exactly kind.width bytes starting at offset."""
    data = _account_bytes(account)
    width = kind.width
    if offset < 0 or offset + width > len(data):
        raise OutOfBoundsError(offset, width, len(data))
    return data[offset : offset + width]


@dataclass(frozen=True)
class Accessor:
    """A field kind bound to the offset where it starts."""

    kind: FieldKind
    offset: int

    @property
    def width(self) -> int:
        return self.kind.width

    def access(self, account: Any) -> bytes:
        return read_field(account, self.kind, self.offset)


def to_u64(raw: bytes) -> int:
    if len(raw) != 8:
        raise ValueError(f"u64 needs exactly 8 bytes, got {len(raw)}")
    return struct.unpack("<Q", raw)[0]


def to_pubkey(raw: bytes) -> Pubkey:
    if len(raw) != 32:
        raise ValueError(f"pubkey needs exactly 32 bytes, got {len(raw)}")
    return Pubkey.from_bytes(raw)


def pubkey_from_serum_slice(words: Sequence[int]) -> Pubkey:
    """Build a pubkey from the four little-endian u64 words Serum stores it as."""
    if len(words) != 4:
        raise ValueError(f"serum pubkey needs 4 u64 words, got {len(words)}")
    return Pubkey.from_bytes(struct.pack("<4Q", *words))

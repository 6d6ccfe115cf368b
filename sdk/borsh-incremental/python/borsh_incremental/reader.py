"""Borsh incremental deserialization reader.

Provides cursor-based reading of Borsh-serialized binary data. Every read
checks the remaining length first and raises BufferTooShortError rather than
returning a partial value, so callers never see zero-filled fields.
"""

from __future__ import annotations

import struct

from borsh_incremental.errors import (
    BufferTooShortError,
    InvalidTagError,
    TrailingBytesError,
)


class IncrementalReader:
    """Cursor-based Borsh binary reader with incremental deserialization."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _require(self, n: int, what: str) -> None:
        if self._offset + n > len(self._data):
            raise BufferTooShortError(what, self._offset, n, self.remaining)

    def _unpack(self, fmt: str, size: int, what: str) -> int:
        self._require(size, what)
        (v,) = struct.unpack_from(fmt, self._data, self._offset)
        self._offset += size
        return v

    # --- Strict read methods (raise on insufficient data) ---

    def read_u8(self) -> int:
        self._require(1, "u8")
        v = self._data[self._offset]
        self._offset += 1
        return v

    def read_bool(self) -> bool:
        return self.read_u8() != 0

    def read_u16(self) -> int:
        return self._unpack("<H", 2, "u16")

    def read_u32(self) -> int:
        return self._unpack("<I", 4, "u32")

    def read_i32(self) -> int:
        return self._unpack("<i", 4, "i32")

    def read_u64(self) -> int:
        return self._unpack("<Q", 8, "u64")

    def read_i64(self) -> int:
        return self._unpack("<q", 8, "i64")

    def read_u128(self) -> int:
        self._require(16, "u128")
        low, high = struct.unpack_from("<QQ", self._data, self._offset)
        self._offset += 16
        return low | (high << 64)

    def read_bytes(self, n: int) -> bytes:
        self._require(n, f"{n} bytes")
        v = bytes(self._data[self._offset : self._offset + n])
        self._offset += n
        return v

    def read_pubkey_raw(self) -> bytes:
        """Read a 32-byte public key as raw bytes."""
        self._require(32, "pubkey")
        return self.read_bytes(32)

    def read_option_pubkey_raw(self) -> bytes | None:
        """Read a Borsh Option<Pubkey>: a 0/1 tag, then 32 bytes when set."""
        tag_offset = self._offset
        tag = self.read_u8()
        if tag == 0:
            return None
        if tag != 1:
            raise InvalidTagError("option", tag, tag_offset)
        return self.read_pubkey_raw()

    def read_u16_array(self, n: int) -> list[int]:
        self._require(2 * n, f"[u16; {n}]")
        v = list(struct.unpack_from(f"<{n}H", self._data, self._offset))
        self._offset += 2 * n
        return v

    def expect_end(self) -> None:
        """Raise TrailingBytesError if any bytes are left unread."""
        if self.remaining:
            raise TrailingBytesError(self._offset, self.remaining)

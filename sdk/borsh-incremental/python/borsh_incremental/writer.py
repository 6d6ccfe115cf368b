"""Borsh serialization writer, the inverse of IncrementalReader."""

from __future__ import annotations

import struct

from borsh_incremental.errors import BorshError

_U64_MAX = (1 << 64) - 1


class IncrementalWriter:
    """Append-only Borsh binary writer."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def _pack(self, fmt: str, v: int, what: str) -> None:
        try:
            self._buf += struct.pack(fmt, v)
        except struct.error as exc:
            raise BorshError(f"borsh: value {v!r} out of range for {what}") from exc

    def write_u8(self, v: int) -> None:
        self._pack("<B", v, "u8")

    def write_bool(self, v: bool) -> None:
        self.write_u8(1 if v else 0)

    def write_u16(self, v: int) -> None:
        self._pack("<H", v, "u16")

    def write_u32(self, v: int) -> None:
        self._pack("<I", v, "u32")

    def write_i32(self, v: int) -> None:
        self._pack("<i", v, "i32")

    def write_u64(self, v: int) -> None:
        self._pack("<Q", v, "u64")

    def write_i64(self, v: int) -> None:
        self._pack("<q", v, "i64")

    def write_u128(self, v: int) -> None:
        if not 0 <= v < (1 << 128):
            raise BorshError(f"borsh: value {v!r} out of range for u128")
        self._buf += struct.pack("<QQ", v & _U64_MAX, v >> 64)

    def write_bytes(self, v: bytes, n: int | None = None) -> None:
        """Write raw bytes. When n is given the length must match exactly."""
        if n is not None and len(v) != n:
            raise BorshError(f"borsh: expected {n} bytes, got {len(v)}")
        self._buf += v

    def write_pubkey_raw(self, v: bytes) -> None:
        self.write_bytes(v, 32)

    def write_option_pubkey_raw(self, v: bytes | None) -> None:
        if v is None:
            self.write_u8(0)
            return
        self.write_u8(1)
        self.write_pubkey_raw(v)

    def write_u16_array(self, values: list[int], n: int) -> None:
        if len(values) != n:
            raise BorshError(f"borsh: expected {n} u16 values, got {len(values)}")
        for v in values:
            self.write_u16(v)

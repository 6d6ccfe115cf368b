"""Opaque leading bytes of Atrix account layouts."""

from __future__ import annotations

ACCOUNT_PADDING_SIZE = 8


class Reserved(bytes):
    """``bytes`` subclass marking the 8-byte account prefix.

    The prefix is carried through decode and encode untouched; nothing in
    this package interprets it::

        padding: Reserved = Reserved.zeroed()
    """

    def __new__(cls, data: bytes) -> Reserved:
        return super().__new__(cls, data)

    @classmethod
    def zeroed(cls, size: int = ACCOUNT_PADDING_SIZE) -> Reserved:
        return cls(bytes(size))

    def __repr__(self) -> str:
        return f"Reserved({self.hex()})"

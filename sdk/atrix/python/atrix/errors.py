"""Exceptions raised by the Atrix bindings.

Everything derives from ValueError so a batch scanner can catch bad account
data with a single handler. Borsh layout errors are re-exported from
borsh_incremental.
"""

from borsh_incremental.errors import (
    BorshError,
    BufferTooShortError,
    InvalidTagError,
    TrailingBytesError,
)


class AtrixError(ValueError):
    """Base class for errors raised by this package."""


class InvalidSeedsError(AtrixError):
    """Too many seeds, or a seed longer than the runtime allows."""


class NoValidBumpFoundError(AtrixError):
    """Every bump from 255 down to 0 produced an on-curve address."""


class OutOfBoundsError(AtrixError):
    """A raw field read would run past the end of the account data."""

    def __init__(self, offset: int, width: int, size: int) -> None:
        super().__init__(
            f"field of {width} bytes at offset {offset} is out of bounds "
            f"for {size} bytes of account data"
        )
        self.offset = offset
        self.width = width
        self.size = size


class MalformedFeedError(AtrixError):
    """The price feed account could not be decoded."""


class UnknownInstructionNameError(AtrixError):
    """No discriminator is known or computable for an instruction name."""


class UnknownLayoutError(AtrixError, KeyError):
    """No account layout is registered under the requested name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


__all__ = [
    "AtrixError",
    "BorshError",
    "BufferTooShortError",
    "InvalidSeedsError",
    "InvalidTagError",
    "MalformedFeedError",
    "NoValidBumpFoundError",
    "OutOfBoundsError",
    "TrailingBytesError",
    "UnknownInstructionNameError",
    "UnknownLayoutError",
]

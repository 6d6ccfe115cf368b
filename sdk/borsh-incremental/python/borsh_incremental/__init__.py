from borsh_incremental.errors import (
    BorshError,
    BufferTooShortError,
    InvalidTagError,
    TrailingBytesError,
)
from borsh_incremental.reader import IncrementalReader
from borsh_incremental.writer import IncrementalWriter

__all__ = [
    "BorshError",
    "BufferTooShortError",
    "IncrementalReader",
    "IncrementalWriter",
    "InvalidTagError",
    "TrailingBytesError",
]

"""Errors raised while reading or writing Borsh data."""


class BorshError(ValueError):
    """Base class for Borsh (de)serialization failures."""


class BufferTooShortError(BorshError):
    """The buffer ended before the next field could be read."""

    def __init__(self, what: str, offset: int, need: int, have: int) -> None:
        super().__init__(
            f"borsh: not enough data for {what} at offset {offset}: "
            f"need {need} bytes, have {have}"
        )
        self.offset = offset
        self.need = need
        self.have = have


class TrailingBytesError(BorshError):
    """Bytes remained after the last field in strict mode."""

    def __init__(self, offset: int, remaining: int) -> None:
        super().__init__(
            f"borsh: {remaining} trailing bytes after offset {offset}"
        )
        self.offset = offset
        self.remaining = remaining


class InvalidTagError(BorshError):
    """An Option or enum tag byte held an unexpected value."""

    def __init__(self, what: str, tag: int, offset: int) -> None:
        super().__init__(f"borsh: invalid {what} tag {tag} at offset {offset}")
        self.tag = tag
        self.offset = offset

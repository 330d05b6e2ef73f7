from __future__ import annotations


class ReplayDecodeError(ValueError):
    """Base error for a replay that cannot be decoded.

    `offset` is the absolute byte offset (from the start of the replay buffer)
    of the read that failed.
    """

    def __init__(self, message: str, *, offset: int) -> None:
        super().__init__(f"{message} (at offset {int(offset)})")
        self.message = str(message)
        self.offset = int(offset)


class TruncatedBufferError(ReplayDecodeError):
    def __init__(self, *, offset: int, wanted: int, available: int) -> None:
        super().__init__(
            f"unexpected end of buffer: wanted {int(wanted)} bytes, {int(available)} available",
            offset=offset,
        )
        self.wanted = int(wanted)
        self.available = int(available)


class InconsistentLengthError(ReplayDecodeError):
    """A declared length field does not fit inside its enclosing bounds."""

    def __init__(self, field: str, *, offset: int, length: int, available: int) -> None:
        super().__init__(
            f"{field} declares {int(length)} bytes but only {int(available)} remain",
            offset=offset,
        )
        self.field = str(field)
        self.length = int(length)
        self.available = int(available)

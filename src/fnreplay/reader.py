from __future__ import annotations

from typing import Any

from construct import Construct, ConstructError, Float32l, Int8sl, Int8ul, Int16sl, Int16ul, Int32sl, Int32ul

from .errors import InconsistentLengthError, ReplayDecodeError, TruncatedBufferError
from .strings import decode_fstring, fstring_byte_length


class ByteReader:
    """Forward-only little-endian cursor over an immutable byte buffer.

    Sub-readers keep the absolute `base_offset` of their slice so errors raised
    while decoding a nested payload still point into the original replay.
    """

    __slots__ = ("_data", "_pos", "base_offset")

    def __init__(self, data: bytes | bytearray | memoryview, *, base_offset: int = 0) -> None:
        self._data = bytes(data)
        self._pos = 0
        self.base_offset = int(base_offset)

    @property
    def offset(self) -> int:
        return self.base_offset + self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def _take(self, size: int) -> bytes:
        size = int(size)
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        if size > self.remaining:
            raise TruncatedBufferError(offset=self.offset, wanted=size, available=self.remaining)
        start = self._pos
        self._pos += size
        return self._data[start : self._pos]

    def read_bytes(self, size: int) -> bytes:
        return self._take(size)

    def read_rest(self) -> bytes:
        return self._take(self.remaining)

    def skip(self, size: int) -> None:
        self._take(size)

    def sub_reader(self, size: int) -> ByteReader:
        base = self.offset
        return ByteReader(self._take(size), base_offset=base)

    def read_declared(self, size: int, *, field: str, length_offset: int | None = None) -> bytes:
        """Read `size` bytes announced by a length field of the payload itself."""
        size = int(size)
        if size < 0 or size > self.remaining:
            raise InconsistentLengthError(
                field,
                offset=self.offset if length_offset is None else length_offset,
                length=size,
                available=self.remaining,
            )
        return self._take(size)

    def parse(self, con: Construct) -> Any:
        """Parse a fixed-size construct at the cursor."""
        start = self.offset
        data = self._take(con.sizeof())
        try:
            return con.parse(data)
        except ConstructError as exc:
            raise ReplayDecodeError(str(exc), offset=start) from exc

    def read_u8(self) -> int:
        return int(self.parse(Int8ul))

    def read_i8(self) -> int:
        return int(self.parse(Int8sl))

    def read_u16(self) -> int:
        return int(self.parse(Int16ul))

    def read_i16(self) -> int:
        return int(self.parse(Int16sl))

    def read_u32(self) -> int:
        return int(self.parse(Int32ul))

    def read_i32(self) -> int:
        return int(self.parse(Int32sl))

    def read_f32(self) -> float:
        return float(self.parse(Float32l))

    def read_fstring(self, *, field: str = "string") -> str:
        length_offset = self.offset
        length = self.read_i32()
        size = fstring_byte_length(length)
        data_offset = self.offset
        data = self.read_declared(size, field=field, length_offset=length_offset)
        return decode_fstring(length, data, offset=data_offset)

    def read_raw_string(self, *, field: str = "string") -> str:
        # No wide-string handling: the length is a plain byte count.
        length_offset = self.offset
        length = self.read_i32()
        data = self.read_declared(length, field=field, length_offset=length_offset)
        return data.replace(b"\x00", b"").decode("utf-8", errors="replace")

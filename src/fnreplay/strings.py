"""Length-prefixed string codec used by every name field in the container.

The int32 length prefix selects the encoding: a negative length means
`-length` UTF-16-LE code units, a non-negative one means `length` bytes of
narrow text. Unreal writes both variants NUL terminated.

Narrow strings are decoded as UTF-8, the same as the event id/group/metadata
strings, so ASCII names read identically and UTF-8 names written by tools
survive. Bytes that are not valid UTF-8 are replaced rather than rejected.
"""

from __future__ import annotations

from construct import Int32sl

from .errors import TruncatedBufferError

WIDE_ENCODING = "utf-16-le"
NARROW_ENCODING = "utf-8"


def fstring_byte_length(length: int) -> int:
    length = int(length)
    if length < 0:
        return -length * 2
    return length


def decode_fstring(length: int, data: bytes, *, offset: int = 0) -> str:
    size = fstring_byte_length(length)
    if len(data) < size:
        raise TruncatedBufferError(offset=offset, wanted=size, available=len(data))
    raw = bytes(data[:size])
    if length < 0:
        text = raw.decode(WIDE_ENCODING, errors="replace")
        if text.endswith("\x00"):
            text = text[:-1]
        return text
    return raw.replace(b"\x00", b"").decode(NARROW_ENCODING, errors="replace")


def encode_fstring(text: str, *, wide: bool | None = None) -> bytes:
    """Encode `text` as length prefix + NUL terminated payload.

    With `wide=None` the wide form is used for any non-ASCII text, as Unreal
    does. The empty string is written as a bare zero length.
    """

    if not text:
        return Int32sl.build(0)
    if wide is None:
        wide = not text.isascii()
    if wide:
        raw = (text + "\x00").encode(WIDE_ENCODING)
        return Int32sl.build(-(len(raw) // 2)) + raw
    raw = text.encode(NARROW_ENCODING) + b"\x00"
    return Int32sl.build(len(raw)) + raw

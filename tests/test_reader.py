from __future__ import annotations

import pytest
from construct import Float32l, Int32ul, Struct

from fnreplay.errors import InconsistentLengthError, ReplayDecodeError, TruncatedBufferError
from fnreplay.reader import ByteReader


def test_reads_little_endian_primitives() -> None:
    blob = (
        b"\xfe"
        + b"\x34\x12"
        + b"\xff\xff"
        + b"\x78\x56\x34\x12"
        + b"\xfe\xff\xff\xff"
        + Float32l.build(1.5)
    )
    reader = ByteReader(blob)
    assert reader.read_u8() == 0xFE
    assert reader.read_u16() == 0x1234
    assert reader.read_i16() == -1
    assert reader.read_u32() == 0x12345678
    assert reader.read_i32() == -2
    assert reader.read_f32() == 1.5
    assert reader.at_end()
    assert reader.offset == len(blob)


def test_signed_byte_and_skip() -> None:
    reader = ByteReader(b"\x00\x00\x80")
    reader.skip(2)
    assert reader.read_i8() == -128


def test_read_past_end_raises_without_consuming() -> None:
    reader = ByteReader(b"\x01\x02\x03")
    reader.skip(1)
    with pytest.raises(TruncatedBufferError) as info:
        reader.read_u32()
    assert info.value.offset == 1
    assert info.value.wanted == 4
    assert info.value.available == 2
    assert reader.remaining == 2
    assert reader.read_u16() == 0x0302


def test_sub_reader_keeps_absolute_offsets() -> None:
    reader = ByteReader(b"\xaa" * 4 + b"\x01\x00" + b"\xbb", base_offset=100)
    reader.skip(4)
    sub = reader.sub_reader(2)
    assert sub.base_offset == 104
    assert reader.offset == 106
    assert sub.read_u16() == 1
    with pytest.raises(TruncatedBufferError) as info:
        sub.read_u8()
    assert info.value.offset == 106


def test_parse_fixed_struct() -> None:
    pair = Struct("a" / Int32ul, "b" / Int32ul)
    reader = ByteReader(pair.build({"a": 7, "b": 9}) + b"\x00")
    parsed = reader.parse(pair)
    assert (parsed.a, parsed.b) == (7, 9)
    assert reader.remaining == 1


def test_declared_length_that_does_not_fit_is_inconsistent() -> None:
    reader = ByteReader(b"\x10\x00\x00\x00abc", base_offset=20)
    with pytest.raises(InconsistentLengthError) as info:
        reader.read_fstring(field="branch")
    assert info.value.offset == 20
    assert info.value.field == "branch"
    assert isinstance(info.value, ReplayDecodeError)


def test_raw_string_rejects_negative_length() -> None:
    reader = ByteReader(b"\xfe\xff\xff\xffab")
    with pytest.raises(InconsistentLengthError):
        reader.read_raw_string(field="event id")


def test_raw_string_has_no_wide_handling() -> None:
    reader = ByteReader(b"\x04\x00\x00\x00A\x00B\x00")
    assert reader.read_raw_string() == "AB"

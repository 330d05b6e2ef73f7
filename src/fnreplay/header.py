from __future__ import annotations

import logging

from construct import Bytes, Int32sl, Struct

from .reader import ByteReader
from .types import REPLAY_MAGIC, FileHeader

log = logging.getLogger(__name__)

TIMESTAMP_SIZE = 8

FILE_HEADER_PREFIX = Struct(
    "magic" / Int32sl,
    "file_version" / Int32sl,
    "duration_ms" / Int32sl,
    "network_version" / Int32sl,
    "changelist" / Int32sl,
)

FILE_HEADER_SUFFIX = Struct(
    "is_live" / Int32sl,
    "timestamp" / Bytes(TIMESTAMP_SIZE),
    "compressed" / Int32sl,
)


def decode_file_header(reader: ByteReader) -> FileHeader:
    prefix = reader.parse(FILE_HEADER_PREFIX)
    friendly_name = reader.read_fstring(field="friendly name")
    suffix = reader.parse(FILE_HEADER_SUFFIX)

    magic = int(prefix.magic)
    if magic != REPLAY_MAGIC:
        log.warning("unexpected replay magic 0x%08x (expected 0x%08x)", magic & 0xFFFF_FFFF, REPLAY_MAGIC)

    return FileHeader(
        magic=magic,
        file_version=int(prefix.file_version),
        duration_ms=int(prefix.duration_ms),
        network_version=int(prefix.network_version),
        changelist=int(prefix.changelist),
        friendly_name=friendly_name.strip(),
        is_live=int(suffix.is_live) != 0,
        timestamp=bytes(suffix.timestamp),
        compressed=int(suffix.compressed) != 0,
    )

from __future__ import annotations

import logging
from typing import Iterator

from construct import Int32sl, Int32ul, Struct

from .reader import ByteReader
from .types import Chunk, ChunkType

log = logging.getLogger(__name__)

CHUNK_FRAME = Struct(
    "tag" / Int32ul,
    "size" / Int32sl,
)

CHUNK_FRAME_SIZE = CHUNK_FRAME.sizeof()


def iter_chunks(reader: ByteReader) -> Iterator[Chunk]:
    """Yield `(type, size, payload)` frames until the reader is exhausted.

    Unknown tags are kept as `ChunkType.UNKNOWN`; only a size that does not fit
    the remaining buffer is an error.
    """

    while not reader.at_end():
        size_offset = reader.offset + 4
        frame = reader.parse(CHUNK_FRAME)
        tag = int(frame.tag)
        size = int(frame.size)
        payload_offset = reader.offset
        payload = reader.read_declared(size, field="chunk", length_offset=size_offset)
        chunk_type = ChunkType.from_tag(tag)
        log.debug("chunk %s tag=%d offset=%d size=%d", chunk_type.value, tag, payload_offset, size)
        yield Chunk(
            chunk_type=chunk_type,
            tag=tag,
            size_in_bytes=size,
            offset=payload_offset,
            raw_payload=payload,
        )


def decode_chunks(reader: ByteReader) -> tuple[Chunk, ...]:
    return tuple(iter_chunks(reader))

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from pathlib import Path

import msgspec.structs

from .chunks import decode_chunks
from .events import (
    GROUP_PLAYER_ELIM,
    REPLAY_DATA_TIMING_SIZE,
    VersionState,
    decode_checkpoint_chunk,
    decode_event_chunk,
    decode_replay_data,
)
from .header import decode_file_header
from .network import decode_network_header
from .reader import ByteReader
from .types import Chunk, ChunkType, ReplayFile

log = logging.getLogger(__name__)


class ReplayOrderingWarning(UserWarning):
    """A chunk depends on Header state that has not been seen yet."""


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    # Keep `Chunk.raw_payload` even after the chunk has a decoded body.
    keep_raw_payloads: bool = False


def _decode_chunk(chunk: Chunk, state: VersionState, config: DecoderConfig) -> tuple[Chunk, VersionState]:
    payload = chunk.raw_payload or b""
    reader = ByteReader(payload, base_offset=chunk.offset)

    if chunk.chunk_type is ChunkType.NETWORK_HEADER:
        body = decode_network_header(reader)
        state = VersionState.from_network_header(body)
        log.debug(
            "network header: engine_network_version=%d changelist=%d",
            state.engine_network_version,
            state.changelist,
        )
    elif chunk.chunk_type is ChunkType.REPLAY_DATA:
        if len(payload) < REPLAY_DATA_TIMING_SIZE:
            return chunk, state
        body = decode_replay_data(reader)
    elif chunk.chunk_type is ChunkType.CHECKPOINT:
        body = decode_checkpoint_chunk(reader)
    elif chunk.chunk_type is ChunkType.EVENT:
        body = decode_event_chunk(reader, state)
        if body.group == GROUP_PLAYER_ELIM and not state.from_header:
            warnings.warn(
                f"playerElim event at offset {chunk.offset} precedes any Header chunk; "
                "using the default (old) elimination layout",
                category=ReplayOrderingWarning,
                stacklevel=3,
            )
        log.debug("event group=%r metadata=%r decoded=%s", body.group, body.metadata, type(body.decoded).__name__)
    else:
        return chunk, state

    raw_payload = chunk.raw_payload if config.keep_raw_payloads else None
    return msgspec.structs.replace(chunk, raw_payload=raw_payload, body=body), state


def decode(data: bytes | bytearray | memoryview, config: DecoderConfig | None = None) -> ReplayFile:
    """Decode a complete replay container.

    Chunks are decoded in stream order. Header chunks update the forwarded
    `VersionState`, which picks the player elimination layout for later Event
    chunks. Any `ReplayDecodeError` aborts the whole decode.
    """

    if config is None:
        config = DecoderConfig()
    reader = ByteReader(data)
    header = decode_file_header(reader)
    log.debug("file header: %r duration_ms=%d", header.friendly_name, header.duration_ms)

    state = VersionState()
    chunks: list[Chunk] = []
    for chunk in decode_chunks(reader):
        decoded, state = _decode_chunk(chunk, state, config)
        chunks.append(decoded)
    log.debug("decoded %d chunks", len(chunks))
    return ReplayFile(header=header, chunks=tuple(chunks))


def decode_file(path: Path, config: DecoderConfig | None = None) -> ReplayFile:
    return decode(Path(path).read_bytes(), config)

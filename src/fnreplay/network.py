from __future__ import annotations

from typing import Final

from construct import Int16ul, Int32ul, Struct

from .errors import InconsistentLengthError
from .reader import ByteReader
from .types import EngineVersion, LevelEntry, NetworkHeader

GUID_MIN_NETWORK_VERSION: Final[int] = 12
FLAGS_MIN_NETWORK_VERSION: Final[int] = 9
GUID_SIZE: Final[int] = 16

NETWORK_HEADER_PREFIX = Struct(
    "magic" / Int32ul,
    "network_version" / Int32ul,
    "network_checksum" / Int32ul,
    "engine_network_version" / Int32ul,
    "game_network_protocol_version" / Int32ul,
)

ENGINE_VERSION = Struct(
    "major" / Int16ul,
    "minor" / Int16ul,
    "patch" / Int16ul,
)

# Smallest encoded entry: an empty string (4-byte length) plus the uint32 time.
_LEVEL_ENTRY_MIN_SIZE = 8
_STRING_MIN_SIZE = 4


def _read_count(reader: ByteReader, *, field: str, min_entry_size: int) -> int:
    count_offset = reader.offset
    count = reader.read_u32()
    if count * min_entry_size > reader.remaining:
        raise InconsistentLengthError(
            field,
            offset=count_offset,
            length=count * min_entry_size,
            available=reader.remaining,
        )
    return count


def decode_network_header(reader: ByteReader) -> NetworkHeader:
    prefix = reader.parse(NETWORK_HEADER_PREFIX)
    network_version = int(prefix.network_version)

    guid: str | None = None
    if network_version >= GUID_MIN_NETWORK_VERSION:
        guid = reader.read_bytes(GUID_SIZE).hex()

    engine = reader.parse(ENGINE_VERSION)
    changelist = reader.read_u32()
    branch = reader.read_fstring(field="branch")

    level_count = _read_count(reader, field="level list", min_entry_size=_LEVEL_ENTRY_MIN_SIZE)
    levels: list[LevelEntry] = []
    for _ in range(level_count):
        name = reader.read_fstring(field="level name")
        levels.append(LevelEntry(name=name, time_ms=reader.read_u32()))

    flags: int | None = None
    if network_version >= FLAGS_MIN_NETWORK_VERSION:
        flags = reader.read_u32()

    data_count = _read_count(reader, field="game specific data", min_entry_size=_STRING_MIN_SIZE)
    game_specific_data = tuple(reader.read_fstring(field="game specific data") for _ in range(data_count))

    return NetworkHeader(
        magic=int(prefix.magic),
        network_version=network_version,
        network_checksum=int(prefix.network_checksum),
        engine_network_version=int(prefix.engine_network_version),
        game_network_protocol_version=int(prefix.game_network_protocol_version),
        guid=guid,
        engine_version=EngineVersion(major=int(engine.major), minor=int(engine.minor), patch=int(engine.patch)),
        changelist=changelist,
        branch=branch,
        levels=tuple(levels),
        flags=flags,
        game_specific_data=game_specific_data,
    )

from __future__ import annotations

import enum
from typing import Final, Literal, TypeAlias

import msgspec

REPLAY_MAGIC: Final[int] = 0x1CA2E27F

CHUNK_TAG_NETWORK_HEADER: Final[int] = 0
CHUNK_TAG_REPLAY_DATA: Final[int] = 1
CHUNK_TAG_CHECKPOINT: Final[int] = 2
CHUNK_TAG_EVENT: Final[int] = 3
CHUNK_TAG_UNKNOWN: Final[int] = 0xFFFF_FFFF


class ChunkType(enum.Enum):
    NETWORK_HEADER = "NetworkHeader"
    REPLAY_DATA = "ReplayData"
    CHECKPOINT = "Checkpoint"
    EVENT = "Event"
    UNKNOWN = "Unknown"

    @classmethod
    def from_tag(cls, tag: int) -> ChunkType:
        return _CHUNK_TYPE_BY_TAG.get(int(tag) & 0xFFFF_FFFF, cls.UNKNOWN)


_CHUNK_TYPE_BY_TAG: dict[int, ChunkType] = {
    CHUNK_TAG_NETWORK_HEADER: ChunkType.NETWORK_HEADER,
    CHUNK_TAG_REPLAY_DATA: ChunkType.REPLAY_DATA,
    CHUNK_TAG_CHECKPOINT: ChunkType.CHECKPOINT,
    CHUNK_TAG_EVENT: ChunkType.EVENT,
    CHUNK_TAG_UNKNOWN: ChunkType.UNKNOWN,
}


class FileHeader(msgspec.Struct, frozen=True):
    magic: int
    file_version: int
    duration_ms: int
    network_version: int
    changelist: int
    friendly_name: str
    is_live: bool
    # Raw 8 bytes; the epoch of this value is not confirmed so it is kept verbatim.
    timestamp: bytes
    compressed: bool


class EngineVersion(msgspec.Struct, frozen=True):
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class LevelEntry(msgspec.Struct, frozen=True):
    name: str
    time_ms: int


class NetworkHeader(msgspec.Struct, frozen=True):
    magic: int
    network_version: int
    network_checksum: int
    engine_network_version: int
    game_network_protocol_version: int
    guid: str | None
    engine_version: EngineVersion
    changelist: int
    branch: str
    levels: tuple[LevelEntry, ...]
    flags: int | None
    game_specific_data: tuple[str, ...]


class ReplayDataRecord(msgspec.Struct, frozen=True):
    start_time_ms: int
    end_time_ms: int
    payload: bytes | None = None


class MatchTeamStats(msgspec.Struct, frozen=True, tag_field="type", tag="match_team_stats"):
    unknown: int
    final_ranking: int
    total_players: int


class MatchStats(msgspec.Struct, frozen=True, tag_field="type", tag="match_stats"):
    unknown: int
    accuracy: float
    assists: int
    total_eliminations: int
    weapon_damage: int
    other_damage: int
    revives: int
    damage_taken: int
    damage_to_structures: int
    materials_gathered: int
    materials_used: int
    total_traveled: int


class PlayerElimination(msgspec.Struct, frozen=True, tag_field="type", tag="player_elim"):
    # `str` for the old layout (player names), 16 raw id bytes for the new one.
    killed: str | bytes
    killer: str | bytes
    elim_type: int
    knocked: bool


EventPayload: TypeAlias = MatchTeamStats | MatchStats | PlayerElimination

EventKind: TypeAlias = Literal["checkpoint", "event"]


class EventRecord(msgspec.Struct, frozen=True):
    kind: EventKind
    id: str
    group: str
    metadata: str
    time1: int
    time2: int
    declared_payload_size: int
    remaining_payload: bytes | None = None
    decoded: EventPayload | None = None


ChunkBody: TypeAlias = NetworkHeader | ReplayDataRecord | EventRecord


class Chunk(msgspec.Struct, frozen=True):
    chunk_type: ChunkType
    tag: int
    size_in_bytes: int
    offset: int
    raw_payload: bytes | None = None
    body: ChunkBody | None = None


class ReplayFile(msgspec.Struct, frozen=True):
    header: FileHeader
    chunks: tuple[Chunk, ...] = ()

    @property
    def network_header(self) -> NetworkHeader | None:
        for chunk in self.chunks:
            if isinstance(chunk.body, NetworkHeader):
                return chunk.body
        return None

    @property
    def events(self) -> tuple[EventRecord, ...]:
        return tuple(chunk.body for chunk in self.chunks if isinstance(chunk.body, EventRecord))

    @property
    def eliminations(self) -> tuple[PlayerElimination, ...]:
        return tuple(event.decoded for event in self.events if isinstance(event.decoded, PlayerElimination))

    def chunks_of(self, chunk_type: ChunkType) -> tuple[Chunk, ...]:
        return tuple(chunk for chunk in self.chunks if chunk.chunk_type is chunk_type)

"""Checkpoint / Event / ReplayData chunk payloads.

Event payloads are picked by their `metadata` and `group` strings. Player
elimination records exist in two historical layouts; the layout is chosen
from the engine network version and changelist of the most recent Header
chunk (see `VersionState`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

import msgspec.structs
from construct import Bytes, Float32l, Int8ul, Int32ul, Padding, Struct

from .reader import ByteReader
from .types import (
    EventKind,
    EventPayload,
    EventRecord,
    MatchStats,
    MatchTeamStats,
    NetworkHeader,
    PlayerElimination,
    ReplayDataRecord,
)

METADATA_MATCH_TEAM_STATS: Final[str] = "AthenaMatchTeamStats"
METADATA_MATCH_STATS: Final[str] = "AthenaMatchStats"
GROUP_PLAYER_ELIM: Final[str] = "playerElim"
GROUP_CHECKPOINT: Final[str] = "checkpoint"

OLD_ELIM_MAX_ENGINE_NETWORK_VERSION: Final[int] = 11
OLD_ELIM_MAX_CHANGELIST: Final[int] = 6573057

OLD_ELIM_RESERVED_SIZE: Final[int] = 45
NEW_ELIM_RESERVED_SIZE: Final[int] = 87
PLAYER_ID_SIZE: Final[int] = 16

EVENT_TIMING = Struct(
    "time1" / Int32ul,
    "time2" / Int32ul,
    "declared_payload_size" / Int32ul,
)

REPLAY_DATA_TIMING = Struct(
    "start_time_ms" / Int32ul,
    "end_time_ms" / Int32ul,
)
REPLAY_DATA_TIMING_SIZE = REPLAY_DATA_TIMING.sizeof()

MATCH_TEAM_STATS = Struct(
    "unknown" / Int32ul,
    "final_ranking" / Int32ul,
    "total_players" / Int32ul,
)

MATCH_STATS = Struct(
    "unknown" / Int32ul,
    "accuracy" / Float32l,
    "assists" / Int32ul,
    "total_eliminations" / Int32ul,
    "weapon_damage" / Int32ul,
    "other_damage" / Int32ul,
    "revives" / Int32ul,
    "damage_taken" / Int32ul,
    "damage_to_structures" / Int32ul,
    "materials_gathered" / Int32ul,
    "materials_used" / Int32ul,
    "total_traveled" / Int32ul,
)

PLAYER_ELIM_NEW = Struct(
    Padding(NEW_ELIM_RESERVED_SIZE),
    "killed" / Bytes(PLAYER_ID_SIZE),
    Padding(2),
    "killer" / Bytes(PLAYER_ID_SIZE),
    "elim_type" / Int8ul,
    "knocked" / Int32ul,
)

PLAYER_ELIM_TRAILER = Struct(
    "elim_type" / Int8ul,
    "knocked" / Int32ul,
)


@dataclass(frozen=True, slots=True)
class VersionState:
    """Build identifiers forwarded from the latest Header chunk."""

    engine_network_version: int = 0
    changelist: int = 0
    from_header: bool = False

    @classmethod
    def from_network_header(cls, header: NetworkHeader) -> VersionState:
        return cls(
            engine_network_version=int(header.engine_network_version),
            changelist=int(header.changelist),
            from_header=True,
        )

    def uses_old_elim_layout(self) -> bool:
        return (
            self.engine_network_version < OLD_ELIM_MAX_ENGINE_NETWORK_VERSION
            and self.changelist < OLD_ELIM_MAX_CHANGELIST
        )


def decode_match_team_stats(reader: ByteReader) -> MatchTeamStats:
    raw = reader.parse(MATCH_TEAM_STATS)
    return MatchTeamStats(
        unknown=int(raw.unknown),
        final_ranking=int(raw.final_ranking),
        total_players=int(raw.total_players),
    )


def decode_match_stats(reader: ByteReader) -> MatchStats:
    raw = reader.parse(MATCH_STATS)
    return MatchStats(
        unknown=int(raw.unknown),
        accuracy=float(raw.accuracy),
        assists=int(raw.assists),
        total_eliminations=int(raw.total_eliminations),
        weapon_damage=int(raw.weapon_damage),
        other_damage=int(raw.other_damage),
        revives=int(raw.revives),
        damage_taken=int(raw.damage_taken),
        damage_to_structures=int(raw.damage_to_structures),
        materials_gathered=int(raw.materials_gathered),
        materials_used=int(raw.materials_used),
        total_traveled=int(raw.total_traveled),
    )


def decode_player_elim_old(reader: ByteReader) -> PlayerElimination:
    reader.skip(OLD_ELIM_RESERVED_SIZE)
    killed = reader.read_fstring(field="killed")
    killer = reader.read_fstring(field="killer")
    trailer = reader.parse(PLAYER_ELIM_TRAILER)
    return PlayerElimination(
        killed=killed,
        killer=killer,
        elim_type=int(trailer.elim_type),
        knocked=int(trailer.knocked) == 1,
    )


def decode_player_elim_new(reader: ByteReader) -> PlayerElimination:
    raw = reader.parse(PLAYER_ELIM_NEW)
    return PlayerElimination(
        killed=bytes(raw.killed),
        killer=bytes(raw.killer),
        elim_type=int(raw.elim_type),
        knocked=int(raw.knocked) == 1,
    )


def decode_player_elim(reader: ByteReader, state: VersionState) -> PlayerElimination:
    if state.uses_old_elim_layout():
        return decode_player_elim_old(reader)
    return decode_player_elim_new(reader)


def decode_event_payload(
    reader: ByteReader,
    *,
    metadata: str,
    group: str,
    state: VersionState,
) -> EventPayload | None:
    """Decode an Event payload by its metadata/group; `None` when nothing applies.

    Unrecognised kinds are not errors; the caller keeps the raw bytes.
    """

    if metadata == METADATA_MATCH_TEAM_STATS:
        return decode_match_team_stats(reader)
    if metadata == METADATA_MATCH_STATS:
        return decode_match_stats(reader)
    if group == GROUP_PLAYER_ELIM:
        return decode_player_elim(reader, state)
    if group == GROUP_CHECKPOINT:
        # No fields of their own, even when the payload is empty.
        return None
    return None


def _decode_event_prefix(reader: ByteReader, kind: EventKind) -> EventRecord:
    event_id = reader.read_raw_string(field="event id")
    group = reader.read_raw_string(field="event group")
    metadata = reader.read_raw_string(field="event metadata")
    timing = reader.parse(EVENT_TIMING)
    return EventRecord(
        kind=kind,
        id=event_id,
        group=group,
        metadata=metadata,
        time1=int(timing.time1),
        time2=int(timing.time2),
        declared_payload_size=int(timing.declared_payload_size),
    )


def decode_checkpoint_chunk(reader: ByteReader) -> EventRecord:
    return _decode_event_prefix(reader, "checkpoint")


def decode_event_chunk(reader: ByteReader, state: VersionState) -> EventRecord:
    record = _decode_event_prefix(reader, "event")
    payload_offset = reader.offset
    payload = reader.read_rest()
    decoded = decode_event_payload(
        ByteReader(payload, base_offset=payload_offset),
        metadata=record.metadata,
        group=record.group,
        state=state,
    )
    # Decoded payloads are consumed; an empty payload is reported as absent.
    remaining = payload if decoded is None and payload else None
    return msgspec.structs.replace(record, remaining_payload=remaining, decoded=decoded)


def decode_replay_data(reader: ByteReader) -> ReplayDataRecord:
    timing = reader.parse(REPLAY_DATA_TIMING)
    payload = reader.read_rest()
    return ReplayDataRecord(
        start_time_ms=int(timing.start_time_ms),
        end_time_ms=int(timing.end_time_ms),
        payload=payload or None,
    )

from __future__ import annotations

import pytest

import replay_builders as rb
from fnreplay.errors import InconsistentLengthError
from fnreplay.network import decode_network_header
from fnreplay.reader import ByteReader
from fnreplay.types import EngineVersion, LevelEntry


def _decode(**kwargs):
    reader = ByteReader(rb.network_header(**kwargs))
    header = decode_network_header(reader)
    assert reader.at_end()
    return header


def test_decode_full_network_header() -> None:
    header = _decode(
        network_version=14,
        engine_network_version=12,
        changelist=7_123_456,
        levels=(("/Game/Athena/Maps/Athena_Terrain", 0), ("/Game/Athena/Maps/Athena_Faceted", 1500)),
        flags=3,
        game_specific_data=("SubGame=Athena", "ПВП"),
    )
    assert header.magic == 0x2CF5A13D
    assert header.network_version == 14
    assert header.network_checksum == 0xDEADBEEF
    assert header.engine_network_version == 12
    assert header.game_network_protocol_version == 0
    assert header.guid == bytes(range(0x10, 0x20)).hex()
    assert header.engine_version == EngineVersion(major=4, minor=22, patch=0)
    assert str(header.engine_version) == "4.22.0"
    assert header.changelist == 7_123_456
    assert header.branch == "++Fortnite+Release-8.00"
    assert header.levels == (
        LevelEntry(name="/Game/Athena/Maps/Athena_Terrain", time_ms=0),
        LevelEntry(name="/Game/Athena/Maps/Athena_Faceted", time_ms=1500),
    )
    assert header.flags == 3
    assert header.game_specific_data == ("SubGame=Athena", "ПВП")


def test_guid_absent_below_version_12() -> None:
    header = _decode(network_version=11)
    assert header.guid is None
    assert header.branch == "++Fortnite+Release-8.00"


def test_guid_present_at_version_12() -> None:
    header = _decode(network_version=12, guid=bytes(16))
    assert header.guid == "00" * 16


def test_flags_absent_below_version_9() -> None:
    header = _decode(network_version=8)
    assert header.flags is None
    assert header.guid is None


def test_flags_present_with_zero_value_at_version_9() -> None:
    header = _decode(network_version=9, flags=0)
    assert header.flags == 0
    assert header.flags is not None


def test_level_count_larger_than_payload_is_inconsistent() -> None:
    blob = rb.network_header(network_version=8, levels=(("a", 1),))
    # Patch the level count (right after the branch string) to claim 1000 entries.
    branch_end = 20 + 6 + 4 + 4 + len("++Fortnite+Release-8.00") + 1
    patched = blob[:branch_end] + (1000).to_bytes(4, "little") + blob[branch_end + 4 :]
    with pytest.raises(InconsistentLengthError) as info:
        decode_network_header(ByteReader(patched, base_offset=30))
    assert info.value.offset == 30 + branch_end

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fnreplay")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

from .decoder import DecoderConfig, ReplayOrderingWarning, decode, decode_file
from .errors import InconsistentLengthError, ReplayDecodeError, TruncatedBufferError
from .events import VersionState
from .export import dumps_json, format_duration, replay_to_obj
from .types import (
    Chunk,
    ChunkType,
    EngineVersion,
    EventRecord,
    FileHeader,
    LevelEntry,
    MatchStats,
    MatchTeamStats,
    NetworkHeader,
    PlayerElimination,
    ReplayDataRecord,
    ReplayFile,
)

__all__ = [
    "Chunk",
    "ChunkType",
    "DecoderConfig",
    "EngineVersion",
    "EventRecord",
    "FileHeader",
    "InconsistentLengthError",
    "LevelEntry",
    "MatchStats",
    "MatchTeamStats",
    "NetworkHeader",
    "PlayerElimination",
    "ReplayDataRecord",
    "ReplayDecodeError",
    "ReplayFile",
    "ReplayOrderingWarning",
    "TruncatedBufferError",
    "VersionState",
    "decode",
    "decode_file",
    "dumps_json",
    "format_duration",
    "replay_to_obj",
]

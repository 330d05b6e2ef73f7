from __future__ import annotations

from typing import Any

import msgspec

from .types import ReplayFile

# Payload blobs are summarised as {"size": n} unless payloads are requested.
_PAYLOAD_FIELDS = frozenset({"raw_payload", "remaining_payload", "payload"})


def format_duration(ms: int) -> str:
    total_ms = max(0, int(ms))
    total_s, millis = divmod(total_ms, 1000)
    minutes, seconds = divmod(total_s, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def _convert(value: Any, key: str | None, include_payloads: bool) -> Any:
    if isinstance(value, bytes):
        if key in _PAYLOAD_FIELDS and not include_payloads:
            return {"size": len(value)}
        return value.hex()
    if isinstance(value, dict):
        return {k: _convert(v, k, include_payloads) for k, v in value.items()}
    # Struct tuple fields come back from `to_builtins` as tuples.
    if isinstance(value, (list, tuple)):
        return [_convert(v, key, include_payloads) for v in value]
    return value


def replay_to_obj(replay: ReplayFile, *, include_payloads: bool = False) -> dict[str, Any]:
    """Render a decoded replay as JSON-ready builtins.

    Byte fields (timestamp, player ids) become hex strings; payload blobs are
    either hex or a size summary.
    """

    obj = msgspec.to_builtins(replay, builtin_types=(bytes,))
    obj = _convert(obj, None, include_payloads)
    obj["header"]["duration"] = format_duration(replay.header.duration_ms)
    return obj


def dumps_json(replay: ReplayFile, *, indent: int = 2, include_payloads: bool = False) -> bytes:
    raw = msgspec.json.encode(replay_to_obj(replay, include_payloads=include_payloads))
    if indent > 0:
        raw = msgspec.json.format(raw, indent=indent)
    return raw

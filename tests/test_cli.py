from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

import replay_builders as rb
from fnreplay.cli import app

runner = CliRunner()


def _write_replay(tmp_path: Path) -> Path:
    path = tmp_path / "match.replay"
    path.write_bytes(
        rb.replay(
            rb.chunk(0, rb.network_header()),
            rb.chunk(3, rb.event(group="playerElim", payload=rb.elim_new(killed=bytes(16), killer=bytes(16)))),
            rb.chunk(2, rb.event(event_id="checkpoint0", group="checkpoint")),
        )
    )
    return path


def test_cli_decode_prints_json(tmp_path: Path) -> None:
    result = runner.invoke(app, ["decode", str(_write_replay(tmp_path)), "--compact"])
    assert result.exit_code == 0, result.output
    obj = json.loads(result.stdout)
    assert obj["header"]["friendly_name"] == "Unsaved Replay"
    assert [c["chunk_type"] for c in obj["chunks"]] == ["NetworkHeader", "Event", "Checkpoint"]


def test_cli_decode_writes_output(tmp_path: Path) -> None:
    out = tmp_path / "out" / "match.json"
    result = runner.invoke(app, ["decode", str(_write_replay(tmp_path)), "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text())["chunks"][1]["body"]["decoded"]["type"] == "player_elim"


def test_cli_chunks_lists_each_chunk(tmp_path: Path) -> None:
    result = runner.invoke(app, ["chunks", str(_write_replay(tmp_path))])
    assert result.exit_code == 0, result.output
    lines = result.stdout.strip().splitlines()
    assert "duration=0:20:34.567" in lines[0]
    assert len(lines) == 4
    assert "NetworkHeader" in lines[1]
    assert "Checkpoint" in lines[3]


def test_cli_events_lists_decoded_type(tmp_path: Path) -> None:
    result = runner.invoke(app, ["events", str(_write_replay(tmp_path))])
    assert result.exit_code == 0, result.output
    assert "PlayerElimination" in result.stdout
    assert "checkpoint" in result.stdout


def test_cli_reports_decode_error_offset(tmp_path: Path) -> None:
    path = tmp_path / "broken.replay"
    path.write_bytes(rb.file_header() + b"\x03\x00\x00\x00\xff\x00\x00\x00")
    result = runner.invoke(app, ["decode", str(path)])
    assert result.exit_code == 1
    assert "error at offset" in result.output


def test_cli_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["chunks", str(tmp_path / "nope.replay")])
    assert result.exit_code == 1


def test_cli_decode_payloads_switch_dumps_hex(tmp_path: Path) -> None:
    path = _write_replay(tmp_path)
    summary = json.loads(runner.invoke(app, ["decode", str(path), "--compact", "--keep-raw"]).stdout)
    dumped = json.loads(runner.invoke(app, ["decode", str(path), "--compact", "--keep-raw", "--payloads"]).stdout)
    raw = path.read_bytes()
    elim = dumped["chunks"][1]
    assert summary["chunks"][1]["raw_payload"] == {"size": elim["size_in_bytes"]}
    start = elim["offset"]
    assert elim["raw_payload"] == raw[start : start + elim["size_in_bytes"]].hex()
    assert elim["body"]["decoded"]["killed"] == bytes(16).hex()

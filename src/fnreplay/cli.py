from __future__ import annotations

import logging
from pathlib import Path

import typer

from .decoder import DecoderConfig, decode_file
from .errors import ReplayDecodeError
from .export import dumps_json, format_duration
from .types import EventRecord, ReplayFile

app = typer.Typer(add_completion=False)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="log decoder diagnostics to stderr"),
) -> None:
    """Decode Unreal Engine replay containers."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load(replay_file: Path, *, keep_raw: bool = False) -> ReplayFile:
    if not replay_file.is_file():
        typer.echo(f"replay file not found: {replay_file}", err=True)
        raise typer.Exit(code=1)
    try:
        return decode_file(replay_file, DecoderConfig(keep_raw_payloads=keep_raw))
    except ReplayDecodeError as exc:
        typer.echo(f"error at offset {exc.offset}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("decode")
def cmd_decode(
    replay_file: Path = typer.Argument(..., help="replay file path (.replay)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="write JSON here instead of stdout"),
    compact: bool = typer.Option(False, "--compact", help="emit single-line JSON"),
    keep_raw: bool = typer.Option(False, "--keep-raw", help="keep raw chunk payloads next to decoded bodies"),
    payloads: bool = typer.Option(False, "--payloads", help="dump payload bytes as hex instead of their size"),
) -> None:
    """Decode a replay and print the record tree as JSON."""
    replay = _load(replay_file, keep_raw=keep_raw)
    raw = dumps_json(replay, indent=0 if compact else 2, include_payloads=payloads)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(raw + b"\n")
        typer.echo(f"wrote {output}")
        return
    typer.echo(raw.decode("utf-8"))


@app.command("chunks")
def cmd_chunks(
    replay_file: Path = typer.Argument(..., help="replay file path (.replay)"),
) -> None:
    """List the container chunks in stream order."""
    replay = _load(replay_file)
    header = replay.header
    typer.echo(
        f"{header.friendly_name!r}  duration={format_duration(header.duration_ms)}  "
        f"network_version={header.network_version}  changelist={header.changelist}"
    )
    for idx, chunk in enumerate(replay.chunks):
        typer.echo(
            f"{idx:04d}  {chunk.chunk_type.value:<13s} tag=0x{chunk.tag:08x}  "
            f"offset={chunk.offset:<10d} size={chunk.size_in_bytes}"
        )


def _format_event(event: EventRecord) -> str:
    decoded = type(event.decoded).__name__ if event.decoded is not None else "-"
    return f"{event.kind:<10s} t={event.time1:<8d} group={event.group:<16s} metadata={event.metadata:<24s} {decoded}"


@app.command("events")
def cmd_events(
    replay_file: Path = typer.Argument(..., help="replay file path (.replay)"),
) -> None:
    """List checkpoint and event records with their decoded payload type."""
    replay = _load(replay_file)
    events = replay.events
    if not events:
        typer.echo("no events")
        return
    for event in events:
        typer.echo(_format_event(event))


def main(argv: list[str] | None = None) -> None:
    app(prog_name="fnreplay", args=argv)


if __name__ == "__main__":
    main()

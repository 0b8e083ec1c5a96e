"""CLI implementation for unixy."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from . import StreamOptions, Whence, open_stream
from .core.config import DEFAULT_READ_SIZE

app = typer.Typer(add_completion=False, help="Read, write and stat unix-y socket streams.")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@app.callback()
def configure(
    log_level: str = typer.Option("WARNING", "--log-level", help="One of DEBUG, INFO, WARNING, ERROR, CRITICAL"),
):
    """Read, write and stat unix-y socket streams."""
    level = log_level.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"must be one of {', '.join(LOG_LEVELS)}", param_hint="--log-level")
    logging.basicConfig(level=getattr(logging, level), format="%(asctime)s [%(levelname)s] %(name)s: %(message)s", force=True)


def _fail(err: Exception) -> None:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=1)


@app.command()
def cat(
    target: str = typer.Argument(..., help="Socket path, or 0NAME for an abstract socket"),
    offset: int = typer.Option(0, "--offset", min=0, help="Start reading at this byte offset"),
    length: Optional[int] = typer.Option(None, "--length", min=0, help="Stop after N bytes"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    timeout: int = typer.Option(-1, "--timeout", help="Connect timeout in ms (negative = default)"),
):
    """Copy a stream to stdout or a file."""
    sink = open(output, "wb") if output else sys.stdout.buffer
    try:
        with open_stream(target, "r", options=StreamOptions(timeout_ms=timeout)) as stream:
            if offset:
                stream.seek(offset, Whence.SET)
            remaining = length
            while remaining is None or remaining > 0:
                size = DEFAULT_READ_SIZE if remaining is None else min(remaining, DEFAULT_READ_SIZE)
                chunk = stream.read(size)
                if not chunk:
                    break
                sink.write(chunk)
                if remaining is not None:
                    remaining -= len(chunk)
    except OSError as e:
        _fail(e)
    finally:
        if output:
            sink.close()
        else:
            sink.flush()


@app.command()
def put(
    target: str = typer.Argument(..., help="Socket path, or 0NAME for an abstract socket"),
    source: str = typer.Argument("-", help="File to upload, or '-' for stdin"),
    offset: int = typer.Option(0, "--offset", min=0, help="Start writing at this byte offset"),
    timeout: int = typer.Option(-1, "--timeout", help="Connect timeout in ms (negative = default)"),
):
    """Write a file (or stdin) into a stream."""
    src = sys.stdin.buffer if source == "-" else open(source, "rb")
    written = 0
    try:
        with open_stream(target, "w", options=StreamOptions(timeout_ms=timeout)) as stream:
            if offset:
                stream.seek(offset, Whence.SET)
            while chunk := src.read(DEFAULT_READ_SIZE):
                view = memoryview(chunk)
                while view:
                    n = stream.write(view)
                    view = view[n:]
                    written += n
    except OSError as e:
        _fail(e)
    finally:
        if source != "-":
            src.close()
    typer.echo(f"{written} bytes written", err=True)


@app.command()
def stat(
    target: str = typer.Argument(..., help="Socket path, or 0NAME for an abstract socket"),
    timeout: int = typer.Option(-1, "--timeout", help="Connect timeout in ms (negative = default)"),
):
    """Print the size the server reports for a stream, as JSON."""
    try:
        with open_stream(target, "r", options=StreamOptions(timeout_ms=timeout)) as stream:
            size = stream.seek(0, Whence.SIZE)
            payload = {"target": target, "size": size, "session_id": stream.session.id}
    except OSError as e:
        _fail(e)
    typer.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    app()

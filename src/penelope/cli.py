"""CLI implementation for penelope."""

import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer

from . import copy_file, copy_file_async, compress_file, decompress_file
from .compression import CompressionCodec
from .core.errors import ErrorHandler
from .core.model import TransferResult
from .core.retry import RetryPolicy
from .core.util import result_asdict
from .io import DEFAULT_CHUNK_SIZE

app = typer.Typer(add_completion=False, help="Stream, transform and compress large files in chunks.")


class TransformName(str, Enum):
    none = "none"
    upper = "upper"
    lower = "lower"


class Algorithm(str, Enum):
    gzip = "gzip"
    deflate = "deflate"
    bzip2 = "bzip2"


_TRANSFORMS = {
    TransformName.none: None,
    TransformName.upper: bytes.upper,
    TransformName.lower: bytes.lower,
}

_state = {"retries": 3}


@app.callback()
def main(
    retries: int = typer.Option(3, "--retries", min=1, help="Attempts allowed for opening each file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log retries and file events"),
):
    """Stream, transform and compress large files in chunks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    _state["retries"] = retries


def _error_handler() -> ErrorHandler:
    return ErrorHandler(retry_policy=RetryPolicy(max_attempts=_state["retries"]))


def _run(source: Path, action: Callable[[ErrorHandler], TransferResult]) -> None:
    handler = _error_handler()
    try:
        res = action(handler)
    except Exception as e:
        handler.log_error(e, f"Processing {source}")
        res = TransferResult(success=False, source=str(source), destination=None,
                             bytes_in=0, bytes_out=0, chunks=0, error=str(e))

    typer.echo(json.dumps(result_asdict(res)))
    if not res.success:
        raise typer.Exit(code=1)


@app.command()
def copy(
    source: Path = typer.Argument(..., help="File to read"),
    destination: Path = typer.Argument(..., help="File to write (truncated or created)"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Bytes per chunk"),
    transform: TransformName = typer.Option(TransformName.none, "--transform", help="Per-chunk transform"),
    use_async: bool = typer.Option(False, "--async", help="Drive the copy from an event loop"),
):
    """Copy SOURCE to DESTINATION one chunk at a time."""
    fn = _TRANSFORMS[transform]
    if use_async:
        _run(source, lambda h: asyncio.run(
            copy_file_async(source, destination, chunk_size=chunk_size, transform=fn, error_handler=h)))
    else:
        _run(source, lambda h: copy_file(
            source, destination, chunk_size=chunk_size, transform=fn, error_handler=h))


@app.command()
def compress(
    source: Path = typer.Argument(..., help="File to compress"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of SOURCE + extension"),
    algorithm: Algorithm = typer.Option(Algorithm.gzip, "--algorithm", "-a", help="Compression algorithm"),
    level: int = typer.Option(6, "--level", "-l", min=1, max=9, help="Compression level"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Bytes per chunk"),
):
    """Compress SOURCE without loading it into memory."""
    codec = CompressionCodec(algorithm.value, level)
    _run(source, lambda h: compress_file(
        source, output, codec=codec, chunk_size=chunk_size, error_handler=h))


@app.command()
def decompress(
    source: Path = typer.Argument(..., help="File to decompress"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of SOURCE minus extension"),
    algorithm: Algorithm = typer.Option(Algorithm.gzip, "--algorithm", "-a", help="Compression algorithm"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Bytes per chunk"),
):
    """Decompress SOURCE without loading it into memory."""
    codec = CompressionCodec(algorithm.value)
    _run(source, lambda h: decompress_file(
        source, output, codec=codec, chunk_size=chunk_size, error_handler=h))


if __name__ == "__main__":
    app()

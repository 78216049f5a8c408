"""Throughput benchmark for the chunked file handlers.

Writes a large random file, then times chunked read, chunked write and a
per-chunk whitespace-squeezing transform. Meant for manual runs, not CI.
"""

import asyncio
import os
import re
import tempfile
import time
from pathlib import Path

from penelope import ChunkedFileHandler, AsyncChunkedFileHandler

FILE_SIZE = 100 * 1024 * 1024       # 100 MB for plain read/write
TRANSFORM_SIZE = 10 * 1024 * 1024   # 10 MB for transform runs
CHUNK_SIZE = 8192

_PATTERN = b"Hello   World!\n   This   is   a   test   file   with   extra   spaces.\n"
_SPACES = re.compile(rb" +")


def _create_random_file(path: Path, size: int) -> None:
    with open(path, "wb") as f:
        remaining = size
        while remaining > 0:
            n = min(1024 * 1024, remaining)
            f.write(os.urandom(n))
            remaining -= n


def _create_whitespace_file(path: Path, size: int) -> None:
    repeats = size // len(_PATTERN) + 1
    path.write_bytes((_PATTERN * repeats)[:size])


def _report(label: str, nbytes: int, seconds: float) -> None:
    mb = nbytes / (1024 * 1024)
    print(f"{label:<28} {mb:8.1f} MB in {seconds:6.2f}s  ({mb / seconds:8.1f} MB/s)")


def bench_read(path: Path) -> None:
    start = time.perf_counter()
    total = 0
    with ChunkedFileHandler(path, "r", CHUNK_SIZE) as handler:
        for chunk in handler.read_chunked():
            total += len(chunk)
    _report("chunked read", total, time.perf_counter() - start)


def bench_write(path: Path, out: Path) -> None:
    data = path.read_bytes()
    start = time.perf_counter()
    with ChunkedFileHandler(out, "w", CHUNK_SIZE) as handler:
        for progress in handler.write_chunked(data):
            pass
    _report("chunked write", progress.total_written, time.perf_counter() - start)


def bench_transform(path: Path) -> None:
    squeeze = lambda chunk: _SPACES.sub(b" ", chunk)
    start = time.perf_counter()
    total = 0
    with ChunkedFileHandler(path, "r", CHUNK_SIZE, transform=squeeze) as handler:
        for chunk in handler.read_chunked():
            total += len(chunk)
    _report("chunked read + transform", path.stat().st_size, time.perf_counter() - start)


async def bench_async_read(path: Path) -> None:
    start = time.perf_counter()
    total = 0
    async with AsyncChunkedFileHandler(path, "r", CHUNK_SIZE * 16) as handler:
        async for chunk in handler.read_chunked():
            total += len(chunk)
    _report("async chunked read", total, time.perf_counter() - start)


if __name__ == "__main__":
    print("Penelope chunked I/O benchmark")
    print("=" * 40)

    with tempfile.TemporaryDirectory(prefix="penelope_bench_") as tmp:
        tmp = Path(tmp)
        large, spaced, out = tmp / "large.dat", tmp / "spaced.dat", tmp / "output.dat"
        _create_random_file(large, FILE_SIZE)
        _create_whitespace_file(spaced, TRANSFORM_SIZE)

        bench_read(large)
        bench_write(large, out)
        bench_transform(spaced)
        asyncio.run(bench_async_read(large))

    print("\nBenchmark complete!")

"""Local file handlers that stream data in bounded chunks."""

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator, BinaryIO, Iterator, Optional, Union

from ..core.model import WriteProgress
from .base import (
    DEFAULT_CHUNK_SIZE, READ, WRITE, Transform, normalize_mode, validate_chunk_size,
)

logger = logging.getLogger("penelope.io")

_DONE = object()


class ChunkedFileHandler:
    """Synchronous file handler with whole-file and chunked read/write.

    The chunked methods return generators: nothing is read or written until the
    caller asks for the next value, and each step produces exactly one chunk
    (or progress report). A handler owns a single file position, so only one
    operation should be driven at a time.

    Close the handler when done, drained or not; ``with`` does it for you. The
    chunked generators also close it before propagating any exception,
    whether it comes from the file or from the transform.
    """

    def __init__(self, source: Union[Path, str, BinaryIO], mode: str = "r",
                 chunk_size: int = DEFAULT_CHUNK_SIZE, transform: Optional[Transform] = None):
        self._mode = normalize_mode(mode)
        self._chunk_size = validate_chunk_size(chunk_size)
        self._transform = transform
        self._should_close_file = False
        self.bytes_read = 0  # running total of raw bytes

        if hasattr(source, 'read') or hasattr(source, 'write'):
            # BinaryIO object, owned by the caller
            self._file = source
            self._path = getattr(source, 'name', None) or repr(source)
        else:
            # Path or str
            self._path = str(source)
            self._file = open(source, 'rb' if self._mode == READ else 'wb')
            self._should_close_file = True
        logger.debug("Opened %s for %s (chunk_size=%d)",
                     self._path, "reading" if self._mode == READ else "writing", self._chunk_size)

    @property
    def path(self) -> str:
        return str(self._path)

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def transform(self) -> Optional[Transform]:
        return self._transform

    @property
    def closed(self) -> bool:
        return self._file is None

    def set_transform(self, transform: Optional[Transform]) -> None:
        """Replace the active transform; ``None`` removes it."""
        self._transform = transform

    def _apply(self, data: bytes) -> bytes:
        if self._transform is not None:
            return self._transform(data)
        return data

    def _require(self, mode: str) -> None:
        if self._file is None:
            raise IOError(f"Handler for {self.path} is closed")
        if self._mode != mode:
            action = "read from" if mode == READ else "write to"
            raise IOError(f"Cannot {action} {self.path}: handler opened in mode {self._mode!r}")

    def _read(self, size: int) -> bytes:
        if self._file is None:
            raise IOError(f"Handler for {self.path} is closed")
        try:
            data = self._file.read(size)
        except OSError as e:
            raise IOError(f"Failed to read from file: {self.path}") from e
        self.bytes_read += len(data)
        return data

    def _write(self, data: bytes) -> int:
        if self._file is None:
            raise IOError(f"Handler for {self.path} is closed")
        try:
            written = self._file.write(data)
        except OSError as e:
            raise IOError(f"Failed to write to file: {self.path}") from e
        if written is None or written < len(data):
            raise IOError(f"Short write to {self.path}: wrote {written or 0} of {len(data)} bytes")
        return written

    def _flush(self) -> None:
        try:
            self._file.flush()
        except OSError as e:
            raise IOError(f"Failed to flush file: {self.path}") from e

    def _rewind(self) -> None:
        if self._file is None:
            raise IOError(f"Handler for {self.path} is closed")
        try:
            self._file.seek(0)
        except OSError as e:
            raise IOError(f"File is not seekable: {self.path}") from e

    def _size(self) -> int:
        try:
            self._file.seek(0, 2)  # Seek to end
            size = self._file.tell()
            self._file.seek(0)
        except OSError as e:
            raise IOError(f"File is not seekable: {self.path}") from e
        return size

    # --- whole file ---
    def read_sync(self) -> bytes:
        """Read the entire file and apply the transform once to the whole buffer."""
        self._require(READ)
        size = self._size()
        content = self._read(size) if size else b""
        if len(content) < size:
            raise IOError(f"Not enough data: requested {size} bytes from {self.path}, "
                          f"got {len(content)}")
        return self._apply(content)

    def write_sync(self, data: bytes) -> int:
        """Apply the transform once, write the result and return the bytes written."""
        self._require(WRITE)
        written = self._write(self._apply(data))
        self._flush()
        return written

    # --- chunked ---
    def read_chunked(self) -> Iterator[bytes]:
        """Return a generator of transformed chunks, read from the start of the file.

        Each chunk holds at most ``chunk_size`` raw bytes before transformation.
        Chunks the transform turns into ``b""`` are skipped.
        """
        self._require(READ)
        return self._iter_chunks()

    def _iter_chunks(self) -> Iterator[bytes]:
        try:
            self._rewind()
            while True:
                raw = self._read(self._chunk_size)
                if not raw:
                    return
                chunk = self._apply(raw)
                if chunk:
                    yield chunk
        except Exception:
            self.close()
            raise

    def write_chunked(self, data: bytes) -> Iterator[WriteProgress]:
        """Return a generator writing ``data`` in ``chunk_size`` slices.

        One WriteProgress is yielded per slice; the last one always reports
        100 percent. Empty ``data`` yields a single 100 percent report.
        """
        self._require(WRITE)
        return self._iter_progress(data)

    def _iter_progress(self, data: bytes) -> Iterator[WriteProgress]:
        total = len(data)
        if total == 0:
            yield WriteProgress(bytes_written=0, total_written=0, percent_complete=100.0)
            return

        total_written = 0
        try:
            for offset in range(0, total, self._chunk_size):
                written = self._write(self._apply(data[offset:offset + self._chunk_size]))
                total_written += written
                consumed = offset + self._chunk_size
                if consumed >= total:
                    self._flush()
                    # ratio arithmetic must not decide the completion signal
                    percent = 100.0
                else:
                    percent = consumed / total * 100
                yield WriteProgress(bytes_written=written, total_written=total_written,
                                    percent_complete=percent)
        except Exception:
            self.close()
            raise

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Release the file if we opened it. Safe to call more than once."""
        if self._file is None:
            return
        if self._should_close_file:
            self._file.close()
            logger.debug("Closed %s", self.path)
        self._file = None


class AsyncChunkedFileHandler:
    """Asynchronous file handler - thin wrapper around the sync handler.

    Every blocking step runs in a worker thread, one step at a time, so the
    event loop stays free while the chunk protocol keeps its strict alternation.
    """

    def __init__(self, source: Union[Path, str, BinaryIO], mode: str = "r",
                 chunk_size: int = DEFAULT_CHUNK_SIZE, transform: Optional[Transform] = None):
        self._sync_handler = ChunkedFileHandler(source, mode, chunk_size, transform)

    @property
    def path(self) -> str:
        return self._sync_handler.path

    @property
    def mode(self) -> str:
        return self._sync_handler.mode

    @property
    def chunk_size(self) -> int:
        return self._sync_handler.chunk_size

    @property
    def closed(self) -> bool:
        return self._sync_handler.closed

    @property
    def bytes_read(self) -> int:
        return self._sync_handler.bytes_read

    def set_transform(self, transform: Optional[Transform]) -> None:
        self._sync_handler.set_transform(transform)

    async def read_sync(self) -> bytes:
        return await asyncio.to_thread(self._sync_handler.read_sync)

    async def write_sync(self, data: bytes) -> int:
        return await asyncio.to_thread(self._sync_handler.write_sync, data)

    async def read_chunked(self) -> AsyncIterator[bytes]:
        """Async generator of transformed chunks, see ``ChunkedFileHandler.read_chunked``."""
        chunks = self._sync_handler.read_chunked()
        while (chunk := await asyncio.to_thread(next, chunks, _DONE)) is not _DONE:
            yield chunk

    async def write_chunked(self, data: bytes) -> AsyncIterator[WriteProgress]:
        """Async generator of WriteProgress, see ``ChunkedFileHandler.write_chunked``."""
        steps = self._sync_handler.write_chunked(data)
        while (progress := await asyncio.to_thread(next, steps, _DONE)) is not _DONE:
            yield progress

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying sync handler."""
        await asyncio.to_thread(self._sync_handler.close)


def open_local_handler(source: Union[Path, str, BinaryIO], mode: str = "r",
                       chunk_size: int = DEFAULT_CHUNK_SIZE,
                       transform: Optional[Transform] = None) -> ChunkedFileHandler:
    """Create a synchronous chunked file handler."""
    return ChunkedFileHandler(source, mode, chunk_size, transform)


async def open_local_handler_async(source: Union[Path, str, BinaryIO], mode: str = "r",
                                   chunk_size: int = DEFAULT_CHUNK_SIZE,
                                   transform: Optional[Transform] = None) -> AsyncChunkedFileHandler:
    """Create an asynchronous chunked file handler."""
    return await asyncio.to_thread(AsyncChunkedFileHandler, source, mode, chunk_size, transform)

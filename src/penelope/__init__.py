"""Penelope - stream large files through fixed-size chunks, retry with backoff, compress."""

from .core.model import (                                             # re-export
    WriteProgress, TransferResult, ConfigError, DecodeError, RetryExhausted,
)
from .core.retry import RetryConfig, RetryPolicy
from .core.errors import ErrorHandler
from .io import (
    ChunkedFileHandler, AsyncChunkedFileHandler, DEFAULT_CHUNK_SIZE,
    open_handler, open_handler_async,
)
from .compression import CompressionCodec, CompressionConfig, available_algorithms


def copy_file(source, destination, *, chunk_size: int = DEFAULT_CHUNK_SIZE, transform=None,
              error_handler: ErrorHandler | None = None) -> TransferResult:
    """Stream ``source`` into ``destination`` one chunk at a time, applying ``transform`` per chunk."""
    return _pipe(source, destination, None, chunk_size, error_handler, transform)


async def copy_file_async(source, destination, *, chunk_size: int = DEFAULT_CHUNK_SIZE, transform=None,
                          error_handler: ErrorHandler | None = None) -> TransferResult:
    """Async twin of ``copy_file``; the event loop is never blocked by file I/O or backoff."""
    handler = error_handler or ErrorHandler()
    chunks = bytes_out = 0

    reader = await handler.execute_with_retry_async(
        lambda: open_handler_async(source, "r", chunk_size, transform), f"Opening {source}")
    async with reader:
        writer = await handler.execute_with_retry_async(
            lambda: open_handler_async(destination, "w", chunk_size), f"Opening {destination}")
        async with writer:
            async for chunk in reader.read_chunked():
                bytes_out += await writer.write_sync(chunk)
                chunks += 1

    return TransferResult(success=True, source=str(source), destination=str(destination),
                          bytes_in=reader.bytes_read, bytes_out=bytes_out, chunks=chunks)


def compress_file(source, destination=None, *, codec: CompressionCodec | None = None,
                  chunk_size: int = DEFAULT_CHUNK_SIZE,
                  error_handler: ErrorHandler | None = None) -> TransferResult:
    """Compress ``source`` chunk by chunk; ``destination`` defaults to source + codec extension."""
    codec = codec or CompressionCodec()
    destination = destination or f"{source}{codec.extension()}"
    return _pipe(source, destination, codec.compress_iter, chunk_size, error_handler)


def decompress_file(source, destination=None, *, codec: CompressionCodec | None = None,
                    chunk_size: int = DEFAULT_CHUNK_SIZE,
                    error_handler: ErrorHandler | None = None) -> TransferResult:
    """Decompress ``source`` chunk by chunk into ``destination``.

    Without a destination the codec extension is stripped from the source name,
    or ``.out`` appended when the name does not carry it.
    """
    codec = codec or CompressionCodec()
    if destination is None:
        name = str(source)
        ext = codec.extension()
        destination = name[:-len(ext)] if name.endswith(ext) and len(name) > len(ext) else f"{name}.out"
    return _pipe(source, destination, codec.decompress_iter, chunk_size, error_handler)


def _pipe(source, destination, stage, chunk_size, error_handler, transform=None) -> TransferResult:
    handler = error_handler or ErrorHandler()
    chunks = bytes_out = 0

    with handler.execute_with_retry(
        lambda: open_handler(source, "r", chunk_size, transform), f"Opening {source}"
    ) as reader, handler.execute_with_retry(
        lambda: open_handler(destination, "w", chunk_size), f"Opening {destination}"
    ) as writer:
        pieces = reader.read_chunked()
        for piece in (stage(pieces) if stage else pieces):
            bytes_out += writer.write_sync(piece)
            chunks += 1

    return TransferResult(success=True, source=str(source), destination=str(destination),
                          bytes_in=reader.bytes_read, bytes_out=bytes_out, chunks=chunks)


__all__ = [
    "copy_file", "copy_file_async", "compress_file", "decompress_file",
    "ChunkedFileHandler", "AsyncChunkedFileHandler", "open_handler", "open_handler_async",
    "DEFAULT_CHUNK_SIZE", "WriteProgress", "TransferResult",
    "RetryConfig", "RetryPolicy", "ErrorHandler",
    "CompressionCodec", "CompressionConfig", "available_algorithms",
    "ConfigError", "DecodeError", "RetryExhausted",
]

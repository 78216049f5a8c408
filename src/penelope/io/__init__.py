"""I/O layer for Penelope - streams files through bounded chunks."""

# Re-export these for import convenience
from .base import ChunkedHandler, AsyncChunkedHandler, Transform, DEFAULT_CHUNK_SIZE
from .local import (
    ChunkedFileHandler, AsyncChunkedFileHandler, open_local_handler, open_local_handler_async,
)


def open_handler(source, mode: str = "r", chunk_size: int = DEFAULT_CHUNK_SIZE, transform=None):
    """Factory function to create a ChunkedHandler for a path or binary file object."""
    return open_local_handler(source, mode, chunk_size, transform)


async def open_handler_async(source, mode: str = "r", chunk_size: int = DEFAULT_CHUNK_SIZE, transform=None):
    """Factory function to create an AsyncChunkedHandler for a path or binary file object."""
    return await open_local_handler_async(source, mode, chunk_size, transform)


__all__ = [
    "ChunkedHandler", "AsyncChunkedHandler", "Transform", "DEFAULT_CHUNK_SIZE",
    "ChunkedFileHandler", "AsyncChunkedFileHandler",
    "open_handler", "open_handler_async",
]

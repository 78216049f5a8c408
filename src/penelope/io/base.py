"""Base protocols and shared types for I/O layer."""

from typing import AsyncIterator, Callable, Iterator, Optional, Protocol, runtime_checkable

from ..core.model import ConfigError, WriteProgress


DEFAULT_CHUNK_SIZE = 8192  # 8 KB

# Applied to a whole buffer by the *_sync methods and to each slice by the
# chunked ones, so only boundary-safe transforms give identical results.
Transform = Callable[[bytes], bytes]

READ, WRITE = "r", "w"
_MODES = {"r": READ, "read": READ, "rb": READ, "w": WRITE, "write": WRITE, "wb": WRITE}


def normalize_mode(mode: str) -> str:
    """Map the accepted spellings of a mode onto READ or WRITE."""
    try:
        return _MODES[mode.lower()]
    except (KeyError, AttributeError):
        raise ConfigError(f"Unsupported file mode {mode!r}, expected 'r' or 'w'") from None


def validate_chunk_size(chunk_size: int) -> int:
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ConfigError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    return chunk_size


@runtime_checkable
class ChunkedHandler(Protocol):
    """Protocol for synchronous chunked file handlers."""

    chunk_size: int

    def read_sync(self) -> bytes: ...

    def write_sync(self, data: bytes) -> int: ...

    def read_chunked(self) -> Iterator[bytes]:
        """Yield transformed chunks of at most ``chunk_size`` raw bytes until EOF."""
        ...

    def write_chunked(self, data: bytes) -> Iterator[WriteProgress]:
        """Write ``data`` slice by slice, yielding progress after each slice."""
        ...

    def set_transform(self, transform: Optional[Transform]) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class AsyncChunkedHandler(Protocol):
    """Protocol for asynchronous chunked file handlers."""

    chunk_size: int

    async def read_sync(self) -> bytes: ...

    async def write_sync(self, data: bytes) -> int: ...

    def read_chunked(self) -> AsyncIterator[bytes]: ...

    def write_chunked(self, data: bytes) -> AsyncIterator[WriteProgress]: ...

    def set_transform(self, transform: Optional[Transform]) -> None: ...

    async def close(self) -> None: ...

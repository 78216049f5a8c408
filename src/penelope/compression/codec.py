from __future__ import annotations
import zlib
from dataclasses import dataclass
from typing import Iterable, Iterator

from ..core.model import ConfigError, DecodeError
from .base import _REGISTRY, CompressionBackend

DEFAULT_ALGORITHM = "gzip"
DEFAULT_LEVEL = 6

# everything the stdlib decoders raise on malformed input
_DECODER_ERRORS = (OSError, EOFError, ValueError, zlib.error)


@dataclass(frozen=True)
class CompressionConfig:
    algorithm: str = DEFAULT_ALGORITHM
    level: int = DEFAULT_LEVEL

    def __post_init__(self):
        if _REGISTRY.get(self.algorithm) is None:
            raise ConfigError(
                f"Unsupported compression algorithm: {self.algorithm!r} "
                f"(expected one of {', '.join(_REGISTRY.names())})"
            )
        if isinstance(self.level, bool) or not isinstance(self.level, int) or not 1 <= self.level <= 9:
            raise ConfigError(f"Compression level must be between 1 and 9, got {self.level!r}")


class CompressionCodec:
    """Compressor/decompressor pair for one validated algorithm and level.

    The configuration is checked once, in the constructor; an instance that
    exists is always usable. Output is standard framing for the algorithm, so
    files written with the matching ``extension()`` open in the usual tools.
    Compression ratio is not guaranteed, only that ``decompress`` inverts
    ``compress``.
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM, level: int = DEFAULT_LEVEL):
        self._config = CompressionConfig(algorithm, level)
        self._backend: type[CompressionBackend] = _REGISTRY.get(algorithm)

    @classmethod
    def from_config(cls, config: CompressionConfig) -> "CompressionCodec":
        return cls(config.algorithm, config.level)

    @property
    def config(self) -> CompressionConfig:
        return self._config

    @property
    def algorithm(self) -> str:
        return self._config.algorithm

    @property
    def level(self) -> int:
        return self._config.level

    def extension(self) -> str:
        return self._backend.extension

    def compress(self, data: bytes) -> bytes:
        return self._backend.compress(data, self._config.level)

    def decompress(self, data: bytes) -> bytes:
        if not data:
            raise DecodeError(f"Empty input is not a valid {self.algorithm} stream")
        try:
            return self._backend.decompress(data)
        except _DECODER_ERRORS as e:
            raise DecodeError(f"Failed to decompress {self.algorithm} data: {e}") from e

    def compress_iter(self, chunks: Iterable[bytes]) -> Iterator[bytes]:
        """Compress a stream of chunks without holding the whole input in memory."""
        compressor = self._backend.compressor(self._config.level)
        for chunk in chunks:
            out = compressor.compress(chunk)
            if out:
                yield out
        tail = compressor.flush()
        if tail:
            yield tail

    def decompress_iter(self, chunks: Iterable[bytes]) -> Iterator[bytes]:
        """Decompress a stream of chunks without holding the whole input in memory.

        gzip members and bzip2 streams may be concatenated, as ``cat a.gz b.gz``
        produces; raw deflate holds exactly one stream. Input that ends before
        a stream is complete, including no input at all, raises DecodeError.
        """
        decompressor = self._backend.decompressor()
        for chunk in chunks:
            pending = chunk
            while pending:
                if decompressor.eof:
                    if not self._backend.multi_stream:
                        raise DecodeError(f"Trailing data after {self.algorithm} stream")
                    decompressor = self._backend.decompressor()
                try:
                    out = decompressor.decompress(pending)
                except _DECODER_ERRORS as e:
                    raise DecodeError(f"Failed to decompress {self.algorithm} data: {e}") from e
                if out:
                    yield out
                pending = decompressor.unused_data if decompressor.eof else b""
        if not decompressor.eof:
            raise DecodeError(f"Truncated {self.algorithm} stream")

    def __repr__(self) -> str:
        return f"CompressionCodec(algorithm={self.algorithm!r}, level={self.level})"


def available_algorithms() -> list[str]:
    return _REGISTRY.names()

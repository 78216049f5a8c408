"""Standard-library codecs for the supported algorithms."""

import bz2
import gzip
import zlib

from .base import CompressionBackend

_GZIP_WBITS = 16 + zlib.MAX_WBITS   # gzip header and trailer
_RAW_WBITS = -zlib.MAX_WBITS        # bare DEFLATE stream, no header


class GzipBackend(CompressionBackend):
    algorithm = "gzip"
    extension = ".gz"
    multi_stream = True

    @classmethod
    def compress(cls, data: bytes, level: int) -> bytes:
        # mtime=0 keeps output reproducible
        return gzip.compress(data, compresslevel=level, mtime=0)

    @classmethod
    def decompress(cls, data: bytes) -> bytes:
        return gzip.decompress(data)

    @classmethod
    def compressor(cls, level: int):
        return zlib.compressobj(level, zlib.DEFLATED, _GZIP_WBITS)

    @classmethod
    def decompressor(cls):
        return zlib.decompressobj(_GZIP_WBITS)


class DeflateBackend(CompressionBackend):
    algorithm = "deflate"
    extension = ".zz"

    @classmethod
    def compress(cls, data: bytes, level: int) -> bytes:
        c = cls.compressor(level)
        return c.compress(data) + c.flush()

    @classmethod
    def decompress(cls, data: bytes) -> bytes:
        d = cls.decompressor()
        out = d.decompress(data)
        if not d.eof:
            raise zlib.error("incomplete or truncated deflate stream")
        if d.unused_data:
            raise zlib.error("trailing data after deflate stream")
        return out

    @classmethod
    def compressor(cls, level: int):
        return zlib.compressobj(level, zlib.DEFLATED, _RAW_WBITS)

    @classmethod
    def decompressor(cls):
        return zlib.decompressobj(_RAW_WBITS)


class Bzip2Backend(CompressionBackend):
    algorithm = "bzip2"
    extension = ".bz2"
    multi_stream = True

    @classmethod
    def compress(cls, data: bytes, level: int) -> bytes:
        return bz2.compress(data, compresslevel=level)

    @classmethod
    def decompress(cls, data: bytes) -> bytes:
        return bz2.decompress(data)

    @classmethod
    def compressor(cls, level: int):
        return bz2.BZ2Compressor(level)

    @classmethod
    def decompressor(cls):
        return bz2.BZ2Decompressor()

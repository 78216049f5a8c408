"""Compression codecs - gzip, raw deflate and bzip2."""

# Import backends to trigger registration
from . import backends  # noqa: F401
from .base import CompressionBackend
from .codec import CompressionCodec, CompressionConfig, available_algorithms

__all__ = ["CompressionBackend", "CompressionCodec", "CompressionConfig", "available_algorithms"]

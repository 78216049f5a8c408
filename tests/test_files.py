"""Tests for the file-level helpers."""

import bz2
import gzip
import io
import os

import pytest

from penelope import (
    copy_file, copy_file_async, compress_file, decompress_file,
    CompressionCodec, DecodeError, ErrorHandler, RetryExhausted, RetryPolicy,
)


@pytest.fixture
def no_wait_handler():
    async def no_async_sleep(_seconds):
        pass
    return ErrorHandler(retry_policy=RetryPolicy(max_attempts=2, sleep=lambda _s: None,
                                                 async_sleep=no_async_sleep))


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "sample.bin"
    path.write_bytes(os.urandom(10000) + b"abcdefghij" * 5000)
    return path


class TestCopyFile:

    def test_identity_copy(self, sample, tmp_path):
        dest = tmp_path / "copy.bin"
        res = copy_file(sample, dest, chunk_size=4096)

        assert res.success
        assert dest.read_bytes() == sample.read_bytes()
        assert res.bytes_in == res.bytes_out == sample.stat().st_size
        assert res.chunks == 15  # 60000 / 4096 rounded up

    def test_copy_with_transform(self, tmp_path):
        src = tmp_path / "text.txt"
        src.write_bytes(b"hello world\n" * 1000)
        dest = tmp_path / "upper.txt"

        copy_file(src, dest, chunk_size=100, transform=bytes.upper)
        assert dest.read_bytes() == b"HELLO WORLD\n" * 1000

    def test_file_object_source(self, tmp_path):
        dest = tmp_path / "from_buffer.bin"
        res = copy_file(io.BytesIO(b"0123456789" * 10), dest, chunk_size=16)

        assert res.bytes_in == res.bytes_out == 100
        assert res.chunks == 7
        assert dest.read_bytes() == b"0123456789" * 10

    def test_bytes_in_counts_raw_input(self, tmp_path):
        src = tmp_path / "spaced.txt"
        src.write_bytes(b"a b c d " * 100)
        dest = tmp_path / "packed.txt"

        res = copy_file(src, dest, chunk_size=64, transform=lambda c: c.replace(b" ", b""))
        assert res.bytes_in == 800
        assert res.bytes_out == 400

    def test_missing_source_is_retried(self, tmp_path, no_wait_handler):
        with pytest.raises(RetryExhausted) as exc_info:
            copy_file(tmp_path / "missing.bin", tmp_path / "out.bin", error_handler=no_wait_handler)
        assert exc_info.value.attempts == 2
        assert isinstance(exc_info.value.last_error, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_async_copy(self, sample, tmp_path, no_wait_handler):
        dest = tmp_path / "async_copy.bin"
        res = await copy_file_async(sample, dest, chunk_size=1000, error_handler=no_wait_handler)

        assert res.chunks == 60
        assert dest.read_bytes() == sample.read_bytes()

    @pytest.mark.asyncio
    async def test_async_copy_file_object_source(self, tmp_path, no_wait_handler):
        dest = tmp_path / "async_buffer.bin"
        res = await copy_file_async(io.BytesIO(b"x" * 50), dest, chunk_size=20,
                                    error_handler=no_wait_handler)

        assert res.bytes_in == res.bytes_out == 50
        assert dest.read_bytes() == b"x" * 50

    @pytest.mark.asyncio
    async def test_async_copy_missing_source(self, tmp_path, no_wait_handler):
        with pytest.raises(RetryExhausted):
            await copy_file_async(tmp_path / "missing.bin", tmp_path / "out.bin",
                                  error_handler=no_wait_handler)


class TestCompressFile:

    @pytest.mark.parametrize("algorithm", ["gzip", "deflate", "bzip2"])
    def test_round_trip(self, sample, tmp_path, algorithm):
        codec = CompressionCodec(algorithm, 7)
        compressed = compress_file(sample, codec=codec, chunk_size=2048)

        assert compressed.destination == f"{sample}{codec.extension()}"
        assert compressed.bytes_out < compressed.bytes_in

        restored = tmp_path / "restored.bin"
        decompress_file(compressed.destination, restored, codec=codec, chunk_size=999)
        assert restored.read_bytes() == sample.read_bytes()

    def test_gzip_output_opens_with_gzip(self, sample):
        res = compress_file(sample)
        with gzip.open(res.destination, "rb") as f:
            assert f.read() == sample.read_bytes()

    def test_default_decompress_destination(self, tmp_path):
        src = tmp_path / "notes.txt"
        src.write_bytes(b"some notes " * 100)
        compressed = compress_file(src)
        src.unlink()

        res = decompress_file(compressed.destination)
        assert res.destination == str(src)
        assert src.read_bytes() == b"some notes " * 100

    def test_decompress_without_extension(self, tmp_path):
        src = tmp_path / "blob"
        src.write_bytes(CompressionCodec("bzip2").compress(b"payload"))

        res = decompress_file(src, codec=CompressionCodec("bzip2"))
        assert res.destination == f"{src}.out"
        assert (tmp_path / "blob.out").read_bytes() == b"payload"

    @pytest.mark.parametrize("algorithm,module", [("gzip", gzip), ("bzip2", bz2)])
    def test_decompress_concatenated_members(self, tmp_path, algorithm, module):
        src = tmp_path / "joined.bin"
        src.write_bytes(module.compress(b"part one, ") + module.compress(b"part two"))

        res = decompress_file(src, tmp_path / "joined.txt", codec=CompressionCodec(algorithm), chunk_size=5)
        assert (tmp_path / "joined.txt").read_bytes() == b"part one, part two"
        assert res.bytes_in == src.stat().st_size

    def test_decompress_empty_file(self, tmp_path):
        src = tmp_path / "empty.gz"
        src.write_bytes(b"")

        with pytest.raises(DecodeError, match="Truncated"):
            decompress_file(src)

    def test_decompress_garbage(self, tmp_path):
        src = tmp_path / "garbage.gz"
        src.write_bytes(b"definitely not gzip data")

        with pytest.raises(DecodeError):
            decompress_file(src)

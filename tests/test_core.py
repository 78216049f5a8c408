import pytest

from penelope.core.model import (
    ConfigError, DecodeError, RetryExhausted, TransferResult, WriteProgress,
)
from penelope.core.util import result_asdict
from penelope.io.base import normalize_mode, validate_chunk_size, READ, WRITE


class TestModel:
    """Test shared value types and errors."""

    def test_write_progress_fields(self):
        p = WriteProgress(bytes_written=10, total_written=30, percent_complete=50.0)
        assert (p.bytes_written, p.total_written, p.percent_complete) == (10, 30, 50.0)

    def test_retry_exhausted_carries_last_error(self):
        cause = IOError("boom")
        err = RetryExhausted(3, cause)
        assert err.attempts == 3
        assert err.last_error is cause
        assert "3 attempts" in str(err)
        assert "boom" in str(err)

    def test_error_hierarchy(self):
        assert issubclass(ConfigError, ValueError)
        assert issubclass(DecodeError, RuntimeError)
        assert issubclass(RetryExhausted, RuntimeError)


class TestUtils:
    """Test utility functions."""

    def test_result_asdict_success(self):
        res = TransferResult(success=True, source="a.txt", destination="b.txt",
                             bytes_in=100, bytes_out=40, chunks=2)
        assert result_asdict(res) == {
            "success": True, "source": "a.txt", "destination": "b.txt",
            "bytes_in": 100, "bytes_out": 40, "chunks": 2,
        }

    def test_result_asdict_failure(self):
        res = TransferResult(success=False, source="a.txt", destination=None,
                             bytes_in=0, bytes_out=0, chunks=0, error="No such file")
        assert result_asdict(res) == {"success": False, "source": "a.txt", "error": "No such file"}

    @pytest.mark.parametrize("mode,expected", [
        ("r", READ), ("read", READ), ("rb", READ), ("R", READ),
        ("w", WRITE), ("write", WRITE), ("wb", WRITE),
    ])
    def test_normalize_mode(self, mode, expected):
        assert normalize_mode(mode) == expected

    @pytest.mark.parametrize("mode", ["a", "ab", "r+", "", None])
    def test_normalize_mode_rejects(self, mode):
        with pytest.raises(ConfigError):
            normalize_mode(mode)

    def test_validate_chunk_size(self):
        assert validate_chunk_size(1) == 1
        with pytest.raises(ConfigError):
            validate_chunk_size(0)

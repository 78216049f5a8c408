from __future__ import annotations
from dataclasses import dataclass


@dataclass(slots=True)
class WriteProgress:
    bytes_written: int         # this step
    total_written: int         # running total actually written
    percent_complete: float    # 100.0 on the final step


class ConfigError(ValueError):
    """Raised when a configuration value is rejected at construction time."""
    pass


class DecodeError(RuntimeError):
    """Raised when a decoder reports malformed compressed input."""
    pass


class RetryExhausted(RuntimeError):
    """Raised when an operation still fails after the last allowed attempt."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Operation failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


@dataclass(slots=True)
class TransferResult:
    success: bool
    source: str
    destination: str | None
    bytes_in: int              # raw bytes read from source
    bytes_out: int             # bytes written to destination
    chunks: int
    error: str | None = None

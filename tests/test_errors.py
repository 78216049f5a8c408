"""Tests for the logging error handler."""

import logging

import pytest

from penelope.core.errors import ErrorHandler
from penelope.core.model import RetryExhausted
from penelope.core.retry import RetryPolicy


def _no_sleep(_seconds):
    pass


async def _no_async_sleep(_seconds):
    pass


@pytest.fixture
def handler():
    policy = RetryPolicy(max_attempts=3, sleep=_no_sleep, async_sleep=_no_async_sleep)
    return ErrorHandler(logger=logging.getLogger("penelope.test"), retry_policy=policy)


class TestErrorHandler:

    def test_defaults(self):
        handler = ErrorHandler()
        assert handler.logger.name == "penelope"
        assert handler.retry_policy.max_attempts == 3

    def test_logs_each_retry(self, handler, caplog):
        calls = []

        def op():
            calls.append(1)
            if len(calls) < 3:
                raise IOError("locked")
            return "ok"

        with caplog.at_level(logging.WARNING, logger="penelope.test"):
            assert handler.execute_with_retry(op, "Opening data.bin") == "ok"

        records = [r for r in caplog.records if r.name == "penelope.test"]
        assert len(records) == 2
        assert records[0].getMessage() == "Opening data.bin failed (attempt 1), retrying in 100ms"
        assert records[1].getMessage() == "Opening data.bin failed (attempt 2), retrying in 200ms"
        assert records[0].error == "locked"
        assert records[1].attempt == 2
        assert records[1].delay_ms == 200

    def test_exhausted_propagates(self, handler):
        def op():
            raise IOError("gone")

        with pytest.raises(RetryExhausted):
            handler.execute_with_retry(op, "Reading")

    @pytest.mark.asyncio
    async def test_async_retry(self, handler, caplog):
        calls = []

        async def op():
            calls.append(1)
            if len(calls) < 2:
                raise IOError("busy")
            return 7

        with caplog.at_level(logging.WARNING, logger="penelope.test"):
            assert await handler.execute_with_retry_async(op, "Async op") == 7
        assert "Async op failed (attempt 1)" in caplog.text

    def test_log_error(self, handler, caplog):
        try:
            raise ValueError("bad value")
        except ValueError as e:
            with caplog.at_level(logging.ERROR, logger="penelope.test"):
                handler.log_error(e, "Parsing", path="/tmp/x")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "Parsing: bad value"
        assert record.error_class == "ValueError"
        assert record.path == "/tmp/x"
        assert record.exc_info[0] is ValueError

"""Retry executor with deterministic exponential backoff."""

from __future__ import annotations
import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .model import ConfigError, RetryExhausted

logger = logging.getLogger("penelope.retry")

# on_retry(attempt, delay_ms, error)
RetryCallback = Callable[[int, float, Exception], None]


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    initial_delay: float = 100        # ms
    backoff_multiplier: float = 2.0
    max_delay: float = 5000           # ms

    def __post_init__(self):
        if (isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int)
                or self.max_attempts < 1):
            raise ConfigError(f"max_attempts must be an integer >= 1, got {self.max_attempts!r}")
        if self.initial_delay < 0:
            raise ConfigError(f"initial_delay must be >= 0, got {self.initial_delay}")
        if self.backoff_multiplier < 1:
            raise ConfigError(f"backoff_multiplier must be >= 1, got {self.backoff_multiplier}")
        if self.max_delay < self.initial_delay:
            raise ConfigError(
                f"max_delay ({self.max_delay}) must not be smaller than initial_delay ({self.initial_delay})"
            )

    def delay_for(self, step: int) -> float:
        """Delay in ms before the retry that follows failed attempt ``step + 1``."""
        return min(self.initial_delay * self.backoff_multiplier ** step, self.max_delay)


class RetryPolicy:
    """Run an operation, retrying failures with exponential backoff.

    The first attempt runs immediately. After a failed attempt ``n`` (1-based)
    that is not the last one, ``on_retry(n, delay_ms, error)`` is called, the
    caller is suspended for ``delay_ms`` and the delay grows by
    ``backoff_multiplier`` up to ``max_delay``.

    ``execute`` blocks the calling thread while waiting. Event-loop callers
    should use ``execute_async``, which waits with ``asyncio.sleep`` instead.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 100,
        backoff_multiplier: float = 2.0,
        max_delay: float = 5000,
        *,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._config = RetryConfig(max_attempts, initial_delay, backoff_multiplier, max_delay)
        self._sleep = sleep
        self._async_sleep = async_sleep

    @classmethod
    def from_config(cls, config: RetryConfig, **kwargs) -> "RetryPolicy":
        return cls(
            config.max_attempts,
            config.initial_delay,
            config.backoff_multiplier,
            config.max_delay,
            **kwargs,
        )

    @property
    def config(self) -> RetryConfig:
        return self._config

    @property
    def max_attempts(self) -> int:
        return self._config.max_attempts

    @property
    def initial_delay(self) -> float:
        return self._config.initial_delay

    @property
    def backoff_multiplier(self) -> float:
        return self._config.backoff_multiplier

    @property
    def max_delay(self) -> float:
        return self._config.max_delay

    def _next_delay(self, current: float) -> float:
        return min(current * self._config.backoff_multiplier, self._config.max_delay)

    def _before_retry(self, attempt: int, delay: float, error: Exception,
                      on_retry: Optional[RetryCallback]) -> None:
        logger.debug("Attempt %d failed (%s), retrying in %sms", attempt, error, delay)
        if on_retry is not None:
            on_retry(attempt, delay, error)

    def execute(self, operation: Callable[[], Any], on_retry: Optional[RetryCallback] = None) -> Any:
        """Call ``operation`` until it succeeds or ``max_attempts`` is reached."""
        attempt = 1
        delay = self._config.initial_delay

        while True:
            try:
                return operation()
            except Exception as e:
                if attempt >= self._config.max_attempts:
                    raise RetryExhausted(attempt, e) from e
                self._before_retry(attempt, delay, e, on_retry)
                self._sleep(delay / 1000)
                delay = self._next_delay(delay)
                attempt += 1

    async def execute_async(self, operation: Callable[[], Any],
                            on_retry: Optional[RetryCallback] = None) -> Any:
        """Non-blocking twin of ``execute``; ``operation`` may return an awaitable."""
        attempt = 1
        delay = self._config.initial_delay

        while True:
            try:
                result = operation()
                if inspect.isawaitable(result):
                    result = await result
                return result
            except Exception as e:
                if attempt >= self._config.max_attempts:
                    raise RetryExhausted(attempt, e) from e
                self._before_retry(attempt, delay, e, on_retry)
                await self._async_sleep(delay / 1000)
                delay = self._next_delay(delay)
                attempt += 1

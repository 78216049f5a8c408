from __future__ import annotations
import logging
from typing import Any, Callable, Optional

from .retry import RetryPolicy


class ErrorHandler:
    """Pairs a RetryPolicy with a logger so retries and failures leave a trace."""

    def __init__(self, logger: Optional[logging.Logger] = None,
                 retry_policy: Optional[RetryPolicy] = None):
        self.logger = logger or logging.getLogger("penelope")
        self.retry_policy = retry_policy or RetryPolicy()

    def _on_retry(self, context: str):
        def log_retry(attempt: int, delay: float, error: Exception) -> None:
            self.logger.warning(
                "%s failed (attempt %d), retrying in %gms", context, attempt, delay,
                extra={"error": str(error), "attempt": attempt, "delay_ms": delay},
            )
        return log_retry

    def execute_with_retry(self, operation: Callable[[], Any], context: str) -> Any:
        """Run ``operation`` through the retry policy, logging each retry."""
        return self.retry_policy.execute(operation, self._on_retry(context))

    async def execute_with_retry_async(self, operation: Callable[[], Any], context: str) -> Any:
        return await self.retry_policy.execute_async(operation, self._on_retry(context))

    def log_error(self, error: BaseException, context: str, **extra: Any) -> None:
        self.logger.error(
            "%s: %s", context, error,
            exc_info=(type(error), error, error.__traceback__),
            extra={"error_class": type(error).__name__, **extra},
        )

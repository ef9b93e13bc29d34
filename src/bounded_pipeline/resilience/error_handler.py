"""
Error Handler - Retry with Exponential Backoff.

The pipeline core never retries. Sources and sinks that talk to flaky
resources wrap their calls in ErrorHandler.retry() and report exhaustion
as SourceError/SinkError.

Design Notes:
    - Configurable attempts, base delay, cap and growth factor
    - Only exceptions listed in ``retryable_exceptions`` are retried
    - Sleeping is injectable so tests do not wait
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Tuple, Type, TypeVar

from bounded_pipeline.domain.errors import PipelineError

if TYPE_CHECKING:
    from bounded_pipeline.config.models import RetryPolicyConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhausted(PipelineError):
    """Raised when all retry attempts are exhausted; ``cause`` is the last error."""


@dataclass
class RetryConfig:
    """Configuration for retry logic."""

    max_attempts: int = 3
    base_delay_seconds: float = 0.1
    max_delay_seconds: float = 5.0
    exponential_base: float = 2.0
    retryable_exceptions: Tuple[Type[BaseException], ...] = (Exception,)

    @classmethod
    def from_policy(cls, policy: "RetryPolicyConfig") -> "RetryConfig":
        return cls(
            max_attempts=policy.max_attempts,
            base_delay_seconds=policy.base_delay_seconds,
            max_delay_seconds=policy.max_delay_seconds,
            exponential_base=policy.exponential_base,
        )


class ErrorHandler:
    """Runs callables with retry and exponential backoff."""

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize error handler.

        Args:
            retry_config: Configuration for retry logic
            sleep: Function used to wait between attempts
        """
        self.retry_config = retry_config or RetryConfig()
        self._sleep = sleep

    def retry(
        self,
        func: Callable[[], T],
        operation_name: str = "operation",
    ) -> T:
        """
        Execute function with retry and exponential backoff.

        Args:
            func: Function to execute
            operation_name: Name for logging

        Returns:
            Result of the first successful attempt

        Raises:
            RetryExhausted: When all attempts fail (chained to the last error)
        """
        last_exception: Optional[BaseException] = None
        max_attempts = self.retry_config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                result = func()
            except self.retry_config.retryable_exceptions as e:
                last_exception = e
                if attempt < max_attempts:
                    delay = self._calculate_delay(attempt)
                    logger.warning(
                        f"{operation_name} failed (attempt {attempt}/{max_attempts}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    self._sleep(delay)
                else:
                    logger.error(f"{operation_name} failed after {attempt} attempts: {e}")
            else:
                if attempt > 1:
                    logger.info(f"{operation_name} succeeded on attempt {attempt}")
                return result

        raise RetryExhausted(
            f"{operation_name} failed after {max_attempts} attempts", last_exception
        ) from last_exception

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff."""
        delay = self.retry_config.base_delay_seconds * (
            self.retry_config.exponential_base ** (attempt - 1)
        )
        return min(delay, self.retry_config.max_delay_seconds)

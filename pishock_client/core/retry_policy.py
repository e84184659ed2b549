"""
Retry Policy - Exponential backoff for transient API failures.

Only exception types listed in ``retry_on`` are retried; anything else
propagates from ``execute`` immediately. Used for idempotent requests only.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from pishock_client.core.logging_utils import get_module_logger

logger = get_module_logger("RetryPolicy")


class RetryOutcome(Enum):
    """Outcome of a retry operation."""
    SUCCESS = "success"
    EXHAUSTED = "exhausted"  # All retries failed


@dataclass
class RetryResult:
    """Result of a retry operation."""
    outcome: RetryOutcome
    success: bool
    attempts: int = 0
    final_error: Optional[BaseException] = None
    result_data: Any = None

    def unwrap(self) -> Any:
        """Return the result, re-raising the final error when retries ran out."""
        if not self.success and self.final_error is not None:
            raise self.final_error
        return self.result_data


class RetryPolicy:
    """
    Configurable retry policy with exponential backoff.

    Usage:
        policy = RetryPolicy(max_attempts=3, base_delay=0.5,
                             retry_on=(PiShockConnectionError,))

        result = await policy.execute(lambda: client.post_json(path, payload))
        status, data = result.unwrap()
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 5.0,
        backoff_factor: float = 2.0,
        jitter: float = 0.1,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    ):
        """
        Initialize retry policy.

        Args:
            max_attempts: Maximum number of attempts (including first try)
            base_delay: Initial delay between retries (seconds)
            max_delay: Maximum delay between retries (seconds)
            backoff_factor: Multiplier for exponential backoff
            jitter: Random jitter factor (0.1 = +/-10%)
            retry_on: Exception types that trigger another attempt
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter
        self.retry_on = retry_on

    def get_delay(self, attempt: int) -> float:
        """
        Calculate delay before the given attempt.

        Args:
            attempt: Attempt number (1-based, first retry is attempt 2)

        Returns:
            Delay in seconds with jitter applied
        """
        if attempt <= 1:
            return 0.0

        delay = self.base_delay * (self.backoff_factor ** (attempt - 2))
        delay = min(delay, self.max_delay)

        if self.jitter > 0:
            jitter_range = delay * self.jitter
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0.0, delay)

    async def execute(
        self,
        operation: Callable[[], Awaitable[Any]],
        on_retry: Optional[Callable[[int, BaseException], None]] = None,
    ) -> RetryResult:
        """
        Execute an operation with retries.

        Args:
            operation: Async callable producing the result
            on_retry: Optional callback called before each retry (attempt_num, error)

        Returns:
            RetryResult with outcome, number of attempts and the final result or error
        """
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                delay = self.get_delay(attempt)
                if on_retry and last_error is not None:
                    on_retry(attempt, last_error)
                logger.debug(
                    "Retry attempt %d/%d after %.2fs delay",
                    attempt, self.max_attempts, delay
                )
                await asyncio.sleep(delay)

            try:
                result = await operation()
            except self.retry_on as e:
                last_error = e
                logger.debug("Attempt %d failed: %s", attempt, e)
                continue

            return RetryResult(
                outcome=RetryOutcome.SUCCESS,
                success=True,
                attempts=attempt,
                result_data=result,
            )

        return RetryResult(
            outcome=RetryOutcome.EXHAUSTED,
            success=False,
            attempts=self.max_attempts,
            final_error=last_error,
        )

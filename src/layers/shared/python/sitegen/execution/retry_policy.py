"""Retry policy with exponential backoff and jitter.

Generation jobs get a fixed number of attempts. Between attempts the
policy sleeps ``base_delay * exponential_base ** (attempt - 1)`` seconds
plus jitter. Errors are classified first: permanent ones such as an
unknown template, an invalid profile or a lost business claim end the job
on the spot.

Usage:
    policy = RetryPolicy(RetryConfig(max_attempts=3, base_delay=1.0))

    result = await policy.execute(lambda: pipeline.attempt(job))
    if not result.success:
        await pipeline.record_failure(job, result.error)
"""

import asyncio
import inspect
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

import structlog

from sitegen.utils.exceptions import ConflictError, TemplateNotFoundError, ValidationError

logger = structlog.get_logger()


class ErrorType(str, Enum):
    """Classification of errors for retry decisions."""

    TRANSIENT = "transient"  # Retry likely to succeed
    PERMANENT = "permanent"  # Won't succeed on retry


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay: float = 1.0  # Seconds before the second attempt
    max_delay: float = 30.0
    jitter_factor: float = 0.25  # Random jitter (0-1) as a fraction of the delay
    exponential_base: float = 2.0

    dont_retry_on: tuple[type[Exception], ...] = (
        TemplateNotFoundError,
        ValidationError,
        ConflictError,
    )

    permanent_errors: list[str] = field(default_factory=lambda: [
        "not found",
        "invalid business understanding",
        "validation failed",
    ])

    @classmethod
    def from_settings(cls, max_attempts: int, backoff_seconds: float) -> "RetryConfig":
        """Build the job retry config from GenerationSettings values."""
        return cls(max_attempts=max(1, max_attempts), base_delay=max(0.0, backoff_seconds))


@dataclass
class RetryResult:
    """Result of a retried operation."""

    success: bool
    value: Any = None
    error: Exception | None = None
    attempts: int = 0
    total_delay: float = 0.0
    error_type: ErrorType | None = None


class RetryPolicy:
    """Run an async operation up to ``max_attempts`` times.

    The operation itself decides what one attempt means; the policy only
    sleeps between attempts and stops early on permanent errors.
    """

    def __init__(self, config: RetryConfig | None = None):
        """Initialize retry policy.

        Args:
            config: Retry configuration.
        """
        self.config = config or RetryConfig()
        self.logger = logger.bind(service="retry_policy")

    async def execute(
        self,
        func: Callable[[], Awaitable[Any] | Any],
        context: dict[str, Any] | None = None,
    ) -> RetryResult:
        """Execute a function with retry logic.

        Args:
            func: Zero-argument callable, sync or async.
            context: Optional context for logging.

        Returns:
            RetryResult with the value or the last error.
        """
        attempts = 0
        total_delay = 0.0
        last_error: Exception | None = None
        last_error_type: ErrorType | None = None

        while attempts < self.config.max_attempts:
            attempts += 1

            try:
                result = func()
                if inspect.isawaitable(result):
                    result = await result

                return RetryResult(
                    success=True,
                    value=result,
                    attempts=attempts,
                    total_delay=total_delay,
                )

            except Exception as e:
                last_error = e
                last_error_type = self.classify_error(e)

                if not self._should_retry(last_error_type, attempts):
                    break

                delay = self.calculate_delay(attempts)
                total_delay += delay

                self.logger.info(
                    "Retrying operation",
                    error=str(e),
                    error_type=last_error_type.value,
                    attempt=attempts,
                    next_delay=delay,
                    **(context or {}),
                )

                await asyncio.sleep(delay)

        self.logger.warning(
            "Operation failed",
            error=str(last_error),
            error_type=last_error_type.value if last_error_type else None,
            attempts=attempts,
            total_delay=total_delay,
            **(context or {}),
        )

        return RetryResult(
            success=False,
            error=last_error,
            attempts=attempts,
            total_delay=total_delay,
            error_type=last_error_type,
        )

    def classify_error(self, error: Exception) -> ErrorType:
        """Classify an error as transient or permanent."""
        if isinstance(error, self.config.dont_retry_on):
            return ErrorType.PERMANENT

        error_str = str(error).lower()
        for pattern in self.config.permanent_errors:
            if pattern in error_str:
                return ErrorType.PERMANENT

        if isinstance(error, (TypeError, KeyError)):
            return ErrorType.PERMANENT

        # Network hiccups, deadlines and unknown errors get another attempt
        return ErrorType.TRANSIENT

    def _should_retry(self, error_type: ErrorType, attempts: int) -> bool:
        if attempts >= self.config.max_attempts:
            return False
        return error_type == ErrorType.TRANSIENT

    def calculate_delay(self, attempt: int) -> float:
        """Delay before the next attempt.

        Args:
            attempt: Attempt that just failed (1-indexed).

        Returns:
            Delay in seconds, clamped to [0, max_delay].
        """
        delay = self.config.base_delay * (self.config.exponential_base ** (attempt - 1))

        if self.config.jitter_factor > 0:
            jitter_range = delay * self.config.jitter_factor
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0.0, min(delay, self.config.max_delay))

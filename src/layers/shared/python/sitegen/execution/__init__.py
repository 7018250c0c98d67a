"""Execution infrastructure for retried generation jobs."""

from sitegen.execution.retry_policy import ErrorType, RetryConfig, RetryPolicy, RetryResult

__all__ = [
    "ErrorType",
    "RetryConfig",
    "RetryPolicy",
    "RetryResult",
]

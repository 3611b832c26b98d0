"""Resilience – retry."""

from txunit.resilience.retry import NO_RETRY, NoRetry, RetryOptions, RetryPolicy

__all__ = ["NO_RETRY", "NoRetry", "RetryOptions", "RetryPolicy"]

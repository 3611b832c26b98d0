"""Resilience – retry options and cancellation-aware execution."""
from txunit.resilience.retry.cancellation import cancellable_sleep, run_cancellable
from txunit.resilience.retry.policy import NO_RETRY, NoRetry, RetryOptions, RetryPolicy

__all__ = [
    "NO_RETRY",
    "NoRetry",
    "RetryOptions",
    "RetryPolicy",
    "cancellable_sleep",
    "run_cancellable",
]

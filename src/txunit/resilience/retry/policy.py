"""Resilience – retry options: ``NoRetry`` and the tenacity-backed ``RetryPolicy``.

Retry configuration is an explicit sum type::

    RetryOptions = NoRetry | RetryPolicy

``NoRetry`` runs the operation exactly once.  ``RetryPolicy`` drives
:class:`tenacity.Retrying` (blocking) or :class:`tenacity.AsyncRetrying`
(suspending) from a single set of stop/wait/retry settings, so both call
conventions share one retry decision.
"""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Awaitable, Callable, TypeVar

import tenacity

from txunit.errors import InvalidSettingValueError, OperationCancelledError
from txunit.observability.logging import get_logger
from txunit.resilience.retry.cancellation import cancellable_sleep, run_cancellable

T = TypeVar("T")
logger = get_logger(__name__)


def _default_wait() -> Any:
    # exponential backoff with full jitter, 0.1s base, capped at 30s
    return tenacity.wait_random_exponential(multiplier=0.1, max=30)


@dataclasses.dataclass(frozen=True)
class NoRetry:
    """Single attempt; failures propagate immediately."""

    max_attempts: int = dataclasses.field(default=1, init=False)

    def execute(self, func: Callable[[], T]) -> T:
        return func()

    async def execute_async(
        self,
        func: Callable[[], Awaitable[T]],
        cancellation: asyncio.Event | None = None,
    ) -> T:
        return await run_cancellable(func, cancellation)


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry configuration.

    Parameters
    ----------
    max_attempts:
        Total number of attempts, first call included.
    wait:
        Any tenacity wait strategy, e.g.
        ``tenacity.wait_exponential(multiplier=0.5, max=8)``.
    retryable_exceptions:
        Exception types eligible for retry.
    predicate:
        Optional extra check on the raised exception; both it and
        *retryable_exceptions* must accept a failure for it to be retried.

    :class:`~txunit.errors.OperationCancelledError` is never retried.
    """

    max_attempts: int = 3
    wait: Any = dataclasses.field(default_factory=_default_wait)
    retryable_exceptions: tuple[type[BaseException], ...] = (Exception,)
    predicate: Callable[[BaseException], bool] | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise InvalidSettingValueError("max_attempts", self.max_attempts, "must be at least 1")

    def is_retryable(self, exc: BaseException) -> bool:
        if isinstance(exc, OperationCancelledError):
            return False
        if not isinstance(exc, self.retryable_exceptions):
            return False
        return self.predicate is None or self.predicate(exc)

    def _retrying_kwargs(self) -> dict[str, Any]:
        return {
            "stop": tenacity.stop_after_attempt(self.max_attempts),
            "wait": self.wait,
            "retry": tenacity.retry_if_exception(self.is_retryable),
            "before_sleep": _log_retry,
            "reraise": True,
        }

    def execute(self, func: Callable[[], T]) -> T:
        """Execute *func* synchronously with retry."""
        return tenacity.Retrying(**self._retrying_kwargs())(func)

    async def execute_async(
        self,
        func: Callable[[], Awaitable[T]],
        cancellation: asyncio.Event | None = None,
    ) -> T:
        """Execute *func* asynchronously with retry.

        Setting *cancellation* aborts the in-flight attempt or the wait
        before the next one with :class:`OperationCancelledError`.
        """
        started = 0

        async def _sleep(delay: float) -> None:
            try:
                await cancellable_sleep(delay, cancellation, attempt=started)
            except OperationCancelledError:
                logger.info("retry.cancelled", attempt=started)
                raise

        async for attempt in tenacity.AsyncRetrying(sleep=_sleep, **self._retrying_kwargs()):
            with attempt:
                started = attempt.retry_state.attempt_number
                result = await run_cancellable(func, cancellation, attempt=started)
        return result  # type: ignore[possibly-undefined]


def _log_retry(retry_state: tenacity.RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome is not None else None
    delay = retry_state.next_action.sleep if retry_state.next_action is not None else 0.0
    logger.debug(
        "retry.scheduled",
        attempt=retry_state.attempt_number,
        delay=round(delay, 3),
        error=repr(exc),
    )


type RetryOptions = NoRetry | RetryPolicy

NO_RETRY = NoRetry()

__all__ = ["NO_RETRY", "NoRetry", "RetryOptions", "RetryPolicy"]

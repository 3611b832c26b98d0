"""Resilience – racing attempts and retry waits against a cancellation event."""
from __future__ import annotations

import asyncio
import contextlib
from typing import Awaitable, Callable, TypeVar

from txunit.errors import OperationCancelledError

T = TypeVar("T")


async def run_cancellable(
    func: Callable[[], Awaitable[T]],
    cancellation: asyncio.Event | None,
    *,
    attempt: int = 1,
) -> T:
    """Await ``func()`` unless *cancellation* fires first.

    When the event is set before the call, *func* is never invoked.  When it
    fires mid-flight the attempt task is cancelled and awaited before
    :class:`OperationCancelledError` is raised.  An attempt that cancels
    itself while the event is clear surfaces its own ``CancelledError``.
    """
    if cancellation is None:
        return await func()
    if cancellation.is_set():
        raise OperationCancelledError(attempts=attempt - 1)

    task = asyncio.ensure_future(func())
    waiter = asyncio.ensure_future(cancellation.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
    if task.cancelled() and cancellation.is_set():
        raise OperationCancelledError(attempts=attempt)
    return task.result()


async def cancellable_sleep(
    delay: float,
    cancellation: asyncio.Event | None,
    *,
    attempt: int = 0,
) -> None:
    """Sleep *delay* seconds; raise :class:`OperationCancelledError` if cancelled meanwhile."""
    if cancellation is None:
        await asyncio.sleep(delay)
        return
    if cancellation.is_set():
        raise OperationCancelledError(attempts=attempt)
    try:
        await asyncio.wait_for(cancellation.wait(), timeout=delay)
    except TimeoutError:
        return
    raise OperationCancelledError(attempts=attempt)


__all__ = ["cancellable_sleep", "run_cancellable"]

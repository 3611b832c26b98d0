"""Operation contracts — the queries and commands a unit of work dispatches.

A unit of work never implements these; it only calls ``execute`` with the
connection and transaction it owns.  Void commands are ``Command[None]``.

Commands run under a :class:`~txunit.resilience.retry.RetryPolicy` may be
executed more than once.  Whoever writes a command that is dispatched with
retry enabled is responsible for making it safe to repeat.
"""

from __future__ import annotations

import abc
import asyncio
from typing import Any, Generic, TypeVar

from txunit.kernel.connection import Transaction

T = TypeVar("T")


class Query(abc.ABC, Generic[T]):
    """Synchronous read."""

    @abc.abstractmethod
    def execute(self, connection: Any, transaction: Transaction | None) -> T: ...


class AsyncQuery(abc.ABC, Generic[T]):
    """Asynchronous read."""

    @abc.abstractmethod
    async def execute(
        self,
        connection: Any,
        transaction: Transaction | None,
        cancellation: asyncio.Event | None,
    ) -> T: ...


class Command(abc.ABC, Generic[T]):
    """Synchronous write.

    Set ``requires_transaction = True`` (class attribute or property) for
    commands that must not run outside a transaction.
    """

    requires_transaction: bool = False

    @abc.abstractmethod
    def execute(self, connection: Any, transaction: Transaction | None) -> T: ...


class AsyncCommand(abc.ABC, Generic[T]):
    """Asynchronous write."""

    requires_transaction: bool = False

    @abc.abstractmethod
    async def execute(
        self,
        connection: Any,
        transaction: Transaction | None,
        cancellation: asyncio.Event | None,
    ) -> T: ...


__all__ = ["AsyncCommand", "AsyncQuery", "Command", "Query"]

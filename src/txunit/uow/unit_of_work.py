"""Unit of work over a single connection, with retried dispatch.

Two variants, chosen at construction and fixed for the object's life:

* :class:`PlainUnitOfWork` — no transaction; commands flagged
  ``requires_transaction`` are rejected before they run.
* :class:`TransactionalUnitOfWork` — opens one transaction on the
  connection at construction and keeps it until closed.

Every dispatch follows the same path: refuse if closed, validate the
transaction requirement once, then hand a closure over the held
connection/transaction to the retry options.  Sync and async calls differ
only in which retry adapter runs the closure.

Instances are not safe for concurrent use; serialize calls or use one
unit of work per concurrent task.
"""
from __future__ import annotations

import abc
import asyncio
import uuid
import warnings
from typing import Any, TypeVar

from txunit.errors import TransactionRequiredError, UnitOfWorkClosedError
from txunit.kernel.connection import Connection, IsolationLevel, Transaction
from txunit.kernel.operations import AsyncCommand, AsyncQuery, Command, Query
from txunit.observability.logging import get_logger
from txunit.resilience.retry import NO_RETRY, RetryOptions

T = TypeVar("T")
logger = get_logger(__name__)


class UnitOfWork(abc.ABC):
    """Transactional execution scope over a single connection.

    Use as a context manager so the connection is always released::

        with create_unit_of_work(conn, transactional=True) as uow:
            uow.execute(InsertOrder(order))
            uow.commit()

    Leaving the block never commits; an uncommitted transaction is closed
    and therefore rolled back by the driver.
    """

    def __init__(
        self,
        connection: Connection,
        retry: RetryOptions = NO_RETRY,
        cancellation: asyncio.Event | None = None,
    ) -> None:
        self._connection: Connection | None = connection
        self._retry = retry
        self._cancellation = cancellation
        self._log = logger.bind(uow_id=uuid.uuid4().hex[:12], transactional=self.transactional)
        self._disposed = False

    # -- state -------------------------------------------------------------

    @property
    @abc.abstractmethod
    def transaction(self) -> Transaction | None: ...

    @property
    def transactional(self) -> bool:
        return False

    @property
    def connection(self) -> Connection | None:
        return self._connection

    @property
    def retry(self) -> RetryOptions:
        return self._retry

    @property
    def closed(self) -> bool:
        return self._disposed

    # -- dispatch ----------------------------------------------------------

    def query(self, query: Query[T]) -> T:
        """Run a read through the retry options and return its result."""
        self._ensure_open(query)
        return self._dispatch(query)

    async def query_async(
        self,
        query: AsyncQuery[T],
        cancellation: asyncio.Event | None = None,
    ) -> T:
        """Async read; *cancellation* overrides the unit of work's default signal."""
        self._ensure_open(query)
        return await self._dispatch_async(query, cancellation)

    def execute(self, command: Command[T]) -> T:
        """Run a write; ``Command[None]`` returns ``None``.

        Raises :class:`TransactionRequiredError` without calling the command
        when it needs a transaction this unit of work does not hold.
        """
        self._ensure_open(command)
        self._check_transaction(command)
        return self._dispatch(command)

    async def execute_async(
        self,
        command: AsyncCommand[T],
        cancellation: asyncio.Event | None = None,
    ) -> T:
        self._ensure_open(command)
        self._check_transaction(command)
        return await self._dispatch_async(command, cancellation)

    def _dispatch(self, operation: Query[T] | Command[T]) -> T:
        connection, transaction = self._connection, self.transaction
        return self._retry.execute(lambda: operation.execute(connection, transaction))

    async def _dispatch_async(
        self,
        operation: AsyncQuery[T] | AsyncCommand[T],
        cancellation: asyncio.Event | None,
    ) -> T:
        signal = cancellation if cancellation is not None else self._cancellation
        connection, transaction = self._connection, self.transaction
        return await self._retry.execute_async(
            lambda: operation.execute(connection, transaction, signal),
            signal,
        )

    def _ensure_open(self, operation: Any) -> None:
        if self._disposed:
            raise UnitOfWorkClosedError(
                f"Cannot dispatch {type(operation).__qualname__}: unit of work is closed"
            )

    @abc.abstractmethod
    def _check_transaction(self, command: Command[Any] | AsyncCommand[Any]) -> None: ...

    # -- transaction control -----------------------------------------------

    @abc.abstractmethod
    def commit(self) -> None: ...

    @abc.abstractmethod
    def rollback(self) -> None: ...

    # -- disposal ----------------------------------------------------------

    def close(self) -> None:
        """Release the transaction (if any) then the connection; idempotent."""
        if self._disposed:
            return
        self._disposed = True
        try:
            self._release_transaction()
        finally:
            connection, self._connection = self._connection, None
            if connection is not None:
                connection.close()
            self._log.debug("uow.closed")

    def _release_transaction(self) -> None:
        """Hook for variants that own a transaction."""

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        # partially constructed instances have no _disposed attribute
        if getattr(self, "_disposed", True):
            return
        warnings.warn(
            f"{type(self).__name__} was never closed; releasing it during garbage collection",
            ResourceWarning,
            stacklevel=2,
        )
        self.close()


class PlainUnitOfWork(UnitOfWork):
    """Unit of work without a transaction."""

    @property
    def transaction(self) -> None:
        return None

    def _check_transaction(self, command: Command[Any] | AsyncCommand[Any]) -> None:
        if command.requires_transaction:
            error = TransactionRequiredError(type(command))
            self._log.warning("uow.transaction_required", error=error.to_dict())
            raise error

    def commit(self) -> None:
        """No transaction to commit."""

    def rollback(self) -> None:
        """No transaction to roll back."""


class TransactionalUnitOfWork(UnitOfWork):
    """Unit of work owning one transaction, begun at construction.

    If ``begin_transaction`` fails the exception propagates and the caller
    keeps ownership of *connection*.
    """

    def __init__(
        self,
        connection: Connection,
        isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED,
        retry: RetryOptions = NO_RETRY,
        cancellation: asyncio.Event | None = None,
    ) -> None:
        transaction = connection.begin_transaction(isolation_level)
        self._transaction: Transaction | None = transaction
        self.isolation_level = isolation_level
        super().__init__(connection, retry=retry, cancellation=cancellation)
        self._log.debug("uow.opened", isolation_level=isolation_level.value)

    @property
    def transaction(self) -> Transaction | None:
        return self._transaction

    @property
    def transactional(self) -> bool:
        return True

    def _check_transaction(self, command: Command[Any] | AsyncCommand[Any]) -> None:
        """A transaction is always bound."""

    def commit(self) -> None:
        """Commit the transaction. Not retried; failures propagate unchanged."""
        if self._transaction is None:
            return
        try:
            self._transaction.commit()
        except Exception as exc:
            self._log.error("uow.commit_failed", isolation_level=self.isolation_level.value, error=repr(exc))
            raise
        self._log.info("uow.committed")

    def rollback(self) -> None:
        if self._transaction is None:
            return
        try:
            self._transaction.rollback()
        except Exception as exc:
            self._log.error("uow.rollback_failed", isolation_level=self.isolation_level.value, error=repr(exc))
            raise
        self._log.info("uow.rolled_back")

    def _release_transaction(self) -> None:
        transaction, self._transaction = self._transaction, None
        if transaction is not None:
            transaction.close()


__all__ = ["PlainUnitOfWork", "TransactionalUnitOfWork", "UnitOfWork"]

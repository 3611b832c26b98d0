"""Unit of work construction."""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from txunit.kernel.connection import Connection, IsolationLevel
from txunit.resilience.retry import NO_RETRY, RetryOptions
from txunit.uow.unit_of_work import PlainUnitOfWork, TransactionalUnitOfWork, UnitOfWork

if TYPE_CHECKING:
    from txunit.config.settings import RetrySettings, UnitOfWorkSettings


def create_unit_of_work(
    connection: Connection,
    transactional: bool = False,
    isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED,
    retry: RetryOptions | None = None,
    cancellation: asyncio.Event | None = None,
) -> UnitOfWork:
    """Build a unit of work over *connection*.

    A transactional unit of work begins its transaction here, with
    *isolation_level*; *isolation_level* is ignored otherwise.  ``retry=None``
    is the same as :data:`~txunit.resilience.retry.NO_RETRY`.
    """
    options = retry if retry is not None else NO_RETRY
    if transactional:
        return TransactionalUnitOfWork(
            connection,
            isolation_level=isolation_level,
            retry=options,
            cancellation=cancellation,
        )
    return PlainUnitOfWork(connection, retry=options, cancellation=cancellation)


class UnitOfWorkFactory:
    """Holds the defaults shared by every unit of work it creates."""

    def __init__(
        self,
        retry: RetryOptions = NO_RETRY,
        isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED,
        cancellation: asyncio.Event | None = None,
        transactional: bool = False,
    ) -> None:
        self.retry = retry
        self.isolation_level = isolation_level
        self.cancellation = cancellation
        self.transactional = transactional

    @classmethod
    def from_settings(
        cls,
        uow_settings: "UnitOfWorkSettings",
        retry_settings: "RetrySettings | None" = None,
        cancellation: asyncio.Event | None = None,
    ) -> "UnitOfWorkFactory":
        return cls(
            retry=retry_settings.to_options() if retry_settings is not None else NO_RETRY,
            isolation_level=uow_settings.isolation_level,
            cancellation=cancellation,
            transactional=uow_settings.transactional,
        )

    def create(
        self,
        connection: Connection,
        transactional: bool | None = None,
        isolation_level: IsolationLevel | None = None,
    ) -> UnitOfWork:
        return create_unit_of_work(
            connection,
            transactional=self.transactional if transactional is None else transactional,
            isolation_level=isolation_level or self.isolation_level,
            retry=self.retry,
            cancellation=self.cancellation,
        )


__all__ = ["UnitOfWorkFactory", "create_unit_of_work"]

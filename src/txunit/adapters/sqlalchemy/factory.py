"""SQLAlchemy adapter – SqlAlchemyUnitOfWorkFactory."""
from __future__ import annotations

import asyncio
from typing import Any

from txunit.adapters.sqlalchemy.connection import SqlAlchemyConnection
from txunit.kernel.connection import IsolationLevel
from txunit.resilience.retry import NO_RETRY, RetryOptions
from txunit.uow import UnitOfWork, UnitOfWorkFactory


def _require_sqlalchemy() -> None:
    try:
        import sqlalchemy  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'txunit[sqlalchemy]' to use the SQLAlchemy adapter") from exc


class SqlAlchemyUnitOfWorkFactory(UnitOfWorkFactory):
    """Opens one engine connection per unit of work.

    Non-transactional units of work get an AUTOCOMMIT connection, so each
    statement a plain command runs is committed as it executes.

    Usage::

        factory = SqlAlchemyUnitOfWorkFactory.from_url(
            "postgresql+psycopg://app@db/orders",
            retry=RetryPolicy(max_attempts=3),
        )
        with factory.create(transactional=True) as uow:
            uow.execute(InsertOrder(order))
            uow.commit()
    """

    def __init__(
        self,
        engine: Any,
        retry: RetryOptions = NO_RETRY,
        isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED,
        cancellation: asyncio.Event | None = None,
        transactional: bool = False,
    ) -> None:
        super().__init__(
            retry=retry,
            isolation_level=isolation_level,
            cancellation=cancellation,
            transactional=transactional,
        )
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, **kwargs: Any) -> "SqlAlchemyUnitOfWorkFactory":
        """Create the engine from *database_url*.

        ``retry``, ``isolation_level``, ``cancellation`` and ``transactional``
        configure the factory; everything else goes to ``create_engine``.
        """
        _require_sqlalchemy()
        from sqlalchemy import create_engine

        factory_keys = ("retry", "isolation_level", "cancellation", "transactional")
        factory_kwargs = {k: kwargs.pop(k) for k in factory_keys if k in kwargs}
        return cls(create_engine(database_url, **kwargs), **factory_kwargs)

    def create(  # type: ignore[override]
        self,
        transactional: bool | None = None,
        isolation_level: IsolationLevel | None = None,
    ) -> UnitOfWork:
        if transactional is None:
            transactional = self.transactional
        connection = SqlAlchemyConnection(self.engine.connect())
        try:
            if not transactional:
                connection.use_autocommit()
            return super().create(connection, transactional=transactional, isolation_level=isolation_level)
        except BaseException:
            connection.close()
            raise

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["SqlAlchemyUnitOfWorkFactory"]

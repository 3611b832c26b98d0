"""SQLAlchemy adapter – connection and transaction wrappers."""
from __future__ import annotations

from typing import Any

from txunit.kernel.connection import IsolationLevel


class SqlAlchemyTransaction:
    """Wraps the root transaction of a :class:`sqlalchemy.engine.Connection`."""

    def __init__(self, transaction: Any) -> None:
        self.native = transaction

    @property
    def is_active(self) -> bool:
        return bool(self.native.is_active)

    def commit(self) -> None:
        self.native.commit()

    def rollback(self) -> None:
        self.native.rollback()

    def close(self) -> None:
        # rolls back when neither commit nor rollback happened
        self.native.close()


class SqlAlchemyConnection:
    """Wraps a synchronous :class:`sqlalchemy.engine.Connection`.

    Operations receive this wrapper; use :meth:`execute` or reach the
    underlying connection through :attr:`native`.
    """

    def __init__(self, connection: Any) -> None:
        self.native = connection

    def begin_transaction(self, isolation_level: IsolationLevel) -> SqlAlchemyTransaction:
        if isolation_level is not IsolationLevel.UNSPECIFIED:
            self.native.execution_options(isolation_level=isolation_level.value)
        return SqlAlchemyTransaction(self.native.begin())

    def use_autocommit(self) -> None:
        """Commit every statement as it runs; no transaction is held open."""
        self.native.execution_options(isolation_level="AUTOCOMMIT")

    def execute(self, statement: Any, parameters: Any = None) -> Any:
        return self.native.execute(statement, parameters)

    def close(self) -> None:
        self.native.close()


__all__ = ["SqlAlchemyConnection", "SqlAlchemyTransaction"]

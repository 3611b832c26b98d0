"""Usage errors — the caller asked the unit of work for something it cannot do."""

from __future__ import annotations

from typing import Any

from txunit.errors.base import BaseError


class UsageError(BaseError):
    """Misuse of a unit of work; raised before any operation runs."""

    default_code = "usage_error"


class TransactionRequiredError(UsageError):
    """A command that needs a transaction was sent to a non-transactional unit of work."""

    default_code = "transaction_required"

    def __init__(self, operation_type: type, **kwargs: Any) -> None:
        name = f"{operation_type.__module__}.{operation_type.__qualname__}"
        super().__init__(
            f"The command {name} requires a transaction",
            detail={"operation_type": name},
            **kwargs,
        )
        self.operation_type = operation_type


class UnitOfWorkClosedError(UsageError):
    """An operation was dispatched on a unit of work that was already closed."""

    default_code = "unit_of_work_closed"

    def __init__(self, message: str = "Unit of work is closed", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


__all__ = ["TransactionRequiredError", "UnitOfWorkClosedError", "UsageError"]

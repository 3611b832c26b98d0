"""Connection ports — what a unit of work needs from a database handle."""

from __future__ import annotations

import enum
from typing import Protocol, runtime_checkable


class IsolationLevel(enum.Enum):
    """Transaction isolation level.

    Values are the SQL spellings so they can be passed to drivers as-is.
    ``UNSPECIFIED`` leaves the driver default untouched.
    """

    UNSPECIFIED = "UNSPECIFIED"
    READ_UNCOMMITTED = "READ UNCOMMITTED"
    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"
    SNAPSHOT = "SNAPSHOT"

    @classmethod
    def parse(cls, raw: "str | IsolationLevel") -> "IsolationLevel":
        """Accept ``READ_COMMITTED``, ``"READ COMMITTED"`` or ``"ReadCommitted"``."""
        if isinstance(raw, cls):
            return raw
        text = str(raw).strip()
        normalised = "".join(ch for ch in text if ch.isalnum()).upper()
        for level in cls:
            if normalised == level.name.replace("_", ""):
                return level
        raise ValueError(f"Unknown isolation level {raw!r}")


@runtime_checkable
class Transaction(Protocol):
    """An open database transaction bound to one connection."""

    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def close(self) -> None: ...


@runtime_checkable
class Connection(Protocol):
    """A database connection able to open a transaction."""

    def begin_transaction(self, isolation_level: IsolationLevel) -> Transaction: ...
    def close(self) -> None: ...


__all__ = ["Connection", "IsolationLevel", "Transaction"]

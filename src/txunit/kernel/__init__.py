"""Kernel – connection ports and operation contracts."""

from txunit.kernel.connection import Connection, IsolationLevel, Transaction
from txunit.kernel.operations import AsyncCommand, AsyncQuery, Command, Query

__all__ = [
    "AsyncCommand",
    "AsyncQuery",
    "Command",
    "Connection",
    "IsolationLevel",
    "Query",
    "Transaction",
]

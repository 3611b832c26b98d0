"""Cancellation outcome, kept apart from operation failures."""

from __future__ import annotations

from typing import Any

from txunit.errors.base import BaseError


class OperationCancelledError(BaseError):
    """The cancellation signal fired during an attempt or between attempts.

    ``attempts`` is the number of attempts that had started when the
    signal was observed (``0`` when it was already set on entry).
    """

    default_code = "cancelled"

    def __init__(
        self,
        message: str = "Operation cancelled",
        *,
        attempts: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.attempts = attempts

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["attempts"] = self.attempts
        return base


__all__ = ["OperationCancelledError"]

"""Root error class for the txunit error hierarchy."""

from __future__ import annotations

from typing import Any


class BaseError(Exception):
    """Root of every error txunit raises itself.

    Operation failures are never converted into these; they reach the
    caller as the operation raised them.

    Args:
        message: What went wrong, phrased for the caller.
        code: Stable slug for matching in handlers (``default_code`` otherwise).
        detail: Facts a caller needs to diagnose misuse, e.g. the rejected
            operation type.
        cause: Underlying exception, chained as ``__cause__``.
    """

    default_code: str = "txunit_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the ``error`` field of a structlog event."""
        payload: dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]

"""Config – settings dataclasses for retry and unit of work defaults."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

import tenacity

from txunit.errors import InvalidSettingValueError
from txunit.kernel.connection import IsolationLevel
from txunit.resilience.retry import NO_RETRY, RetryOptions, RetryPolicy


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    ``_prefix`` is prepended to field names to form environment keys.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class RetrySettings(Settings):
    """Retry tuning, read from ``TXUNIT_RETRY_*``."""

    _prefix: ClassVar[str] = "TXUNIT_RETRY"

    enabled: bool = True
    max_attempts: int = 3
    base_delay: float = 0.1
    max_delay: float = 30.0
    jitter: bool = True

    def _validate(self) -> None:
        if self.max_attempts < 1:
            raise InvalidSettingValueError("max_attempts", self.max_attempts, "must be at least 1")
        if self.base_delay < 0:
            raise InvalidSettingValueError("base_delay", self.base_delay, "must not be negative")
        if self.max_delay < self.base_delay:
            raise InvalidSettingValueError("max_delay", self.max_delay, "must not be below base_delay")

    def to_options(self) -> RetryOptions:
        if not self.enabled or self.max_attempts == 1:
            return NO_RETRY
        if self.jitter:
            wait = tenacity.wait_random_exponential(multiplier=self.base_delay, max=self.max_delay)
        else:
            wait = tenacity.wait_exponential(multiplier=self.base_delay, max=self.max_delay)
        return RetryPolicy(max_attempts=self.max_attempts, wait=wait)


@dataclasses.dataclass
class UnitOfWorkSettings(Settings):
    """Unit of work defaults, read from ``TXUNIT_UOW_*``."""

    _prefix: ClassVar[str] = "TXUNIT_UOW"

    transactional: bool = False
    isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED

    def _validate(self) -> None:
        try:
            self.isolation_level = IsolationLevel.parse(self.isolation_level)
        except ValueError as exc:
            raise InvalidSettingValueError("isolation_level", self.isolation_level, str(exc)) from exc


__all__ = ["RetrySettings", "Settings", "UnitOfWorkSettings"]

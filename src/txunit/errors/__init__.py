"""txunit error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── UsageError                 (usage.py)
    │   ├── TransactionRequiredError
    │   └── UnitOfWorkClosedError
    ├── OperationCancelledError    (cancellation.py)
    └── ConfigError                (config.py)
        ├── MissingRequiredSettingError
        └── InvalidSettingValueError

Failures raised by queries and commands themselves are never wrapped;
they reach the caller as raised.
"""

from txunit.errors.base import BaseError
from txunit.errors.cancellation import OperationCancelledError
from txunit.errors.config import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from txunit.errors.usage import TransactionRequiredError, UnitOfWorkClosedError, UsageError

__all__ = [
    "BaseError",
    "ConfigError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "OperationCancelledError",
    "TransactionRequiredError",
    "UnitOfWorkClosedError",
    "UsageError",
]

"""Config – settings dataclasses and loaders."""

from txunit.config.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from txunit.config.settings import RetrySettings, Settings, UnitOfWorkSettings
from txunit.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RetrySettings",
    "Settings",
    "SettingsLoader",
    "UnitOfWorkSettings",
]

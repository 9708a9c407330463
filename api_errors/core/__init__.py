"""Core configuration."""

from .config import (
    AppConfig,
    ErrorCodeStrategy,
    ErrorHandlingConfig,
    ExceptionLogging,
    JsonFieldNames,
    LoggingConfig,
    Settings,
    get_settings,
)

__all__ = [
    "AppConfig",
    "ErrorCodeStrategy",
    "ErrorHandlingConfig",
    "ExceptionLogging",
    "JsonFieldNames",
    "LoggingConfig",
    "Settings",
    "get_settings",
]

"""
Configuration for error handling.
All values come from environment variables (or .env) with safe defaults.
"""

from enum import StrEnum
from functools import lru_cache

from loguru import logger
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ErrorCodeStrategy(StrEnum):
    """How a code is derived for errors without any rule."""

    FALLBACK = "fallback"
    ALL_CAPS = "all_caps"
    FULL_QUALIFIED_NAME = "full_qualified_name"


class ExceptionLogging(StrEnum):
    """How much of a resolved error is written to the log."""

    NO_LOGGING = "no_logging"
    MESSAGE_ONLY = "message_only"
    WITH_STACKTRACE = "with_stacktrace"


class JsonFieldNames(BaseModel):
    """Names of the fields in the JSON error body."""

    code: str = "code"
    message: str = "message"
    status: str = "status"
    field_errors: str = "fieldErrors"
    global_errors: str = "globalErrors"
    parameter_errors: str = "parameterErrors"


class ErrorHandlingConfig(BaseSettings):
    """Error handling configuration.

    ``codes``, ``messages`` and ``http_statuses`` are keyed by exception class
    name, either fully qualified (``myapp.errors.OrderLockedError``) or bare
    (``OrderLockedError``).
    """

    model_config = SettingsConfigDict(
        env_prefix="ERROR_HANDLING_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    enabled: bool = True
    default_error_code_strategy: ErrorCodeStrategy = ErrorCodeStrategy.FALLBACK
    http_status_in_json_response: bool = False
    json_field_names: JsonFieldNames = Field(default_factory=JsonFieldNames)

    codes: dict[str, str] = Field(default_factory=dict)
    messages: dict[str, str] = Field(default_factory=dict)
    http_statuses: dict[str, int] = Field(default_factory=dict)

    exception_logging: ExceptionLogging = ExceptionLogging.MESSAGE_ONLY
    # "404", "4xx" -> "DEBUG" / "INFO" / ...
    log_levels: dict[str, str] = Field(default_factory=dict)
    full_stacktrace_http_statuses: set[str] = Field(default_factory=set)
    full_stacktrace_classes: set[str] = Field(default_factory=set)

    @field_validator("log_levels")
    @classmethod
    def validate_log_levels(cls, v: dict[str, str]) -> dict[str, str]:
        """Normalize level names and reject the ones loguru does not know."""
        levels = {}
        for key, name in v.items():
            level = name.strip().upper()
            try:
                logger.level(level)
            except ValueError:
                raise ValueError(f"Unknown log level {name!r} for {key!r}") from None
            levels[key.strip().lower()] = level
        return levels


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = "INFO"
    format: str = "console"


class AppConfig(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    name: str = "api-errors"
    debug: bool = False


class Settings:
    """Aggregates all configuration sections."""

    def __init__(self) -> None:
        self.error_handling = ErrorHandlingConfig()
        self.logging = LoggingConfig()
        self.app = AppConfig()


@lru_cache
def get_settings() -> Settings:
    """Get the settings singleton (cached)."""
    return Settings()

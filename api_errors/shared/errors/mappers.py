"""Mappers from an error instance to status, code and message.

Each mapper is a pure function of the error and the read-only registry, and
never raises: every error, known or not, gets a usable value.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from starlette.exceptions import HTTPException as StarletteHTTPException

from api_errors.core.config import ErrorCodeStrategy, ErrorHandlingConfig

from .base import AppError, code_from_class_name
from .registry import RuleAttribute, RuleRegistry, qualified_name

DEFAULT_ERROR_CODE = "INTERNAL_ERROR"
DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"
DEFAULT_HTTP_STATUS = 500


def _nearest(
    registry: RuleRegistry,
    error: BaseException,
    attribute: RuleAttribute,
    class_attribute: str,
    accept: Callable[[Any], bool],
) -> Any | None:
    """Walk the MRO once: at each class a rule wins over the class's own attribute."""
    for cls in type(error).__mro__:
        value = registry.value_at(cls, attribute)
        if accept(value):
            return value
        value = cls.__dict__.get(class_attribute)
        if accept(value):
            return value
    return None


def _valid_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _valid_status(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 100 <= value <= 599


class HttpStatusMapper:
    """Resolve the HTTP status for an error.

    Walks the error class MRO from the exact type: at each class a registry
    rule, then a ``status_code`` declared on that class. The default applies
    when nothing in the hierarchy sets a valid status.
    """

    def __init__(self, registry: RuleRegistry) -> None:
        self._registry = registry

    def status_for(self, error: BaseException, default: int = DEFAULT_HTTP_STATUS) -> int:
        status = _nearest(self._registry, error, "status", "status_code", _valid_status)
        if status is not None:
            return status

        return default if _valid_status(default) else DEFAULT_HTTP_STATUS


class ErrorCodeMapper:
    """Resolve the stable error code for an error.

    Walks the error class MRO like ``HttpStatusMapper``, checking a registry
    rule and then a ``code`` declared on each class; the configured default
    strategy covers the rest.
    """

    def __init__(self, registry: RuleRegistry, config: ErrorHandlingConfig) -> None:
        self._registry = registry
        self._strategy = config.default_error_code_strategy

    def code_for(self, error: BaseException, default: str | None = None) -> str:
        code = _nearest(self._registry, error, "code", "code", _valid_text)
        if code is not None:
            return code

        return default or self.default_code(error)

    def default_code(self, error: BaseException) -> str:
        """Code for an error that no rule and no class attribute covers."""
        match self._strategy:
            case ErrorCodeStrategy.ALL_CAPS:
                return code_from_class_name(type(error).__name__) or DEFAULT_ERROR_CODE
            case ErrorCodeStrategy.FULL_QUALIFIED_NAME:
                return qualified_name(type(error))
            case _:
                return DEFAULT_ERROR_CODE


class ErrorMessageMapper:
    """Resolve the human-readable message for an error.

    Order: message carried by the error (only for known categories, so
    unexpected errors never leak internal text), then the MRO walk over
    registry rules and ``default_message`` declared on each class, then the
    generic fallback.
    """

    def __init__(self, registry: RuleRegistry) -> None:
        self._registry = registry

    def message_for(
        self, error: BaseException, default: str | None = None, own: bool = True
    ) -> str:
        """Resolve the message; ``own=False`` ignores the text the error carries."""
        if own and self.is_known(error):
            carried = self.own_message(error)
            if carried:
                return carried

        message = _nearest(self._registry, error, "message", "default_message", _valid_text)
        if message is not None:
            return message

        return default or DEFAULT_ERROR_MESSAGE

    def is_known(self, error: BaseException) -> bool:
        """Check if the error belongs to a category the application expects."""
        return isinstance(error, (AppError, StarletteHTTPException)) or self._registry.knows(
            error
        )

    @staticmethod
    def own_message(error: BaseException) -> str | None:
        """Message carried by the error instance itself."""
        if isinstance(error, StarletteHTTPException):
            return error.detail if isinstance(error.detail, str) and error.detail else None

        if isinstance(error, AppError):
            return getattr(error, "explicit_message", None) or None

        message = getattr(error, "message", None)
        if isinstance(message, str) and message:
            return message

        text = str(error)
        return text or None


@dataclass(frozen=True, slots=True)
class ErrorMappers:
    """The three mappers sharing one registry."""

    status: HttpStatusMapper
    code: ErrorCodeMapper
    message: ErrorMessageMapper

    @classmethod
    def create(cls, registry: RuleRegistry, config: ErrorHandlingConfig) -> "ErrorMappers":
        return cls(
            status=HttpStatusMapper(registry),
            code=ErrorCodeMapper(registry, config),
            message=ErrorMessageMapper(registry),
        )

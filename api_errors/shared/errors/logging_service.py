"""Logging of resolved errors."""

from api_errors.core.config import ErrorHandlingConfig, ExceptionLogging
from api_errors.shared.logging import get_logger

from .registry import qualified_name
from .schemas import ApiErrorResponse

logger = get_logger(__name__)


class ErrorLoggingService:
    """Write a log record for each resolved error.

    The level comes from ``log_levels`` (exact status first, then the ``4xx``
    style family), defaulting to ERROR for server errors and WARNING for the
    rest. A stack trace is attached when ``exception_logging`` asks for it, or
    when the status or the exception class is listed in the full-stacktrace
    settings.
    """

    def __init__(self, config: ErrorHandlingConfig) -> None:
        self._mode = config.exception_logging
        self._levels = {key.lower(): value.upper() for key, value in config.log_levels.items()}
        self._stacktrace_statuses = {status.lower() for status in config.full_stacktrace_http_statuses}
        self._stacktrace_classes = set(config.full_stacktrace_classes)

    def level_for(self, http_status: int) -> str:
        exact = self._levels.get(str(http_status))
        if exact:
            return exact
        family = self._levels.get(f"{http_status // 100}xx")
        if family:
            return family
        return "ERROR" if http_status >= 500 else "WARNING"

    def wants_stacktrace(self, response: ApiErrorResponse, error: BaseException) -> bool:
        if self._mode is ExceptionLogging.WITH_STACKTRACE:
            return True
        status = response.http_status
        if {str(status), f"{status // 100}xx"} & self._stacktrace_statuses:
            return True
        return any(
            cls.__name__ in self._stacktrace_classes
            or qualified_name(cls) in self._stacktrace_classes
            for cls in type(error).__mro__
        )

    def log(self, response: ApiErrorResponse, error: BaseException) -> None:
        if self._mode is ExceptionLogging.NO_LOGGING:
            return

        level = self.level_for(response.http_status)
        bound = logger.bind(
            http_status=response.http_status,
            code=response.code,
            error_type=qualified_name(type(error)),
        )
        if self.wants_stacktrace(response, error):
            bound.opt(exception=error).log(level, "{}: {}", response.code, error)
        else:
            bound.log(level, "{}: {}", response.code, error)

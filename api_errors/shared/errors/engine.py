"""Exception resolution engine.

Turns any raised error into an ``ApiErrorResponse`` and renders it as JSON.
Resolution is synchronous and pure: the registry, handlers and customizers
are fixed at construction time and nothing is written while resolving.
"""

from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any

from fastapi.responses import JSONResponse

from api_errors.core.config import ErrorHandlingConfig
from api_errors.shared.logging import get_logger

from .api_handlers import ApiExceptionHandler
from .builder import JSON_MEDIA_TYPE, ResponseBodyBuilder
from .logging_service import ErrorLoggingService
from .mappers import (
    DEFAULT_ERROR_CODE,
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_HTTP_STATUS,
    ErrorMappers,
)
from .registry import RuleRegistry
from .schemas import ApiErrorResponse

logger = get_logger(__name__)

ResponseCustomizer = Callable[[ApiErrorResponse, BaseException], ApiErrorResponse]


class ResolutionState(StrEnum):
    """Lifecycle of a single error resolution."""

    RECEIVED = "received"
    RESOLVING = "resolving"
    RESPONDED = "responded"


class Resolution:
    """Request-scoped record of one error being turned into a response.

    Moves ``RECEIVED -> RESOLVING -> RESPONDED`` exactly once.
    """

    __slots__ = ("error", "state", "response")

    def __init__(self, error: BaseException) -> None:
        self.error = error
        self.state = ResolutionState.RECEIVED
        self.response: ApiErrorResponse | None = None

    def start(self) -> None:
        if self.state is not ResolutionState.RECEIVED:
            raise RuntimeError(f"Resolution already {self.state}")
        self.state = ResolutionState.RESOLVING

    def finish(self, response: ApiErrorResponse) -> ApiErrorResponse:
        if self.state is not ResolutionState.RESOLVING:
            raise RuntimeError(f"Cannot respond from state {self.state}")
        self.response = response
        self.state = ResolutionState.RESPONDED
        return response


class ExceptionResolutionEngine:
    """Central dispatcher from raised errors to error responses.

    A registered custom handler that claims the error builds the response;
    otherwise the status, code and message mappers resolve it from the
    taxonomy. Customizers run afterwards, in order. Resolution never raises:
    a failing handler or customizer is logged and skipped.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        config: ErrorHandlingConfig,
        handlers: Iterable[ApiExceptionHandler] = (),
        customizers: Iterable[ResponseCustomizer] = (),
    ) -> None:
        self.registry = registry
        self.config = config
        self.mappers = ErrorMappers.create(registry, config)
        self.handlers: tuple[ApiExceptionHandler, ...] = tuple(handlers)
        self.customizers: tuple[ResponseCustomizer, ...] = tuple(customizers)
        self.builder = ResponseBodyBuilder(config)
        self.logging_service = ErrorLoggingService(config)

    def resolve(self, error: BaseException, default_status: int | None = None) -> ApiErrorResponse:
        """Resolve an error into a response.

        Args:
            error: The raised error
            default_status: Status used when nothing maps the error
                (the security adapters pass 401 / 403)

        Returns:
            The resolved response; identical for identical input
        """
        resolution = Resolution(error)
        resolution.start()

        response = self._from_handlers(error)
        if response is None:
            response = self._from_taxonomy(error, default_status)
        response = self._customize(response, error)

        self._log(response, error)
        return resolution.finish(response)

    def render(self, error: BaseException, default_status: int | None = None) -> JSONResponse:
        """Resolve an error and serialize it into a JSON response.

        Serialization failures propagate to the framework.
        """
        return self.to_json_response(self.resolve(error, default_status))

    def to_json_response(self, response: ApiErrorResponse) -> JSONResponse:
        return JSONResponse(
            status_code=response.http_status,
            content=self.builder.build(response),
            headers=response.headers or None,
            media_type=JSON_MEDIA_TYPE,
        )

    def _from_handlers(self, error: BaseException) -> ApiErrorResponse | None:
        for handler in self.handlers:
            try:
                claimed = handler.can_handle(error)
            except Exception:
                logger.exception(
                    "Error handler check failed, skipping handler",
                    handler=type(handler).__name__,
                )
                continue
            if not claimed:
                continue

            try:
                return handler.handle(error, self.mappers)
            except Exception:
                logger.exception(
                    "Error handler failed, falling back to default resolution",
                    handler=type(handler).__name__,
                )
                return None
        return None

    def _log(self, response: ApiErrorResponse, error: BaseException) -> None:
        try:
            self.logging_service.log(response, error)
        except Exception:
            logger.exception("Error logging failed", code=response.code)

    def _from_taxonomy(
        self, error: BaseException, default_status: int | None
    ) -> ApiErrorResponse:
        try:
            status = self.mappers.status.status_for(
                error, default=default_status or DEFAULT_HTTP_STATUS
            )
            code = self.mappers.code.code_for(error)
            message = self.mappers.message.message_for(error)
            return ApiErrorResponse(
                http_status=status,
                code=code,
                message=message,
                properties=self._properties(error),
            )
        except Exception:
            logger.exception("Error resolution failed, using generic response")
            return ApiErrorResponse(
                http_status=DEFAULT_HTTP_STATUS,
                code=DEFAULT_ERROR_CODE,
                message=DEFAULT_ERROR_MESSAGE,
            )

    @staticmethod
    def _properties(error: BaseException) -> dict[str, Any]:
        getter = getattr(error, "response_properties", None)
        if not callable(getter):
            return {}
        properties = getter()
        return dict(properties) if properties else {}

    def _customize(self, response: ApiErrorResponse, error: BaseException) -> ApiErrorResponse:
        for customizer in self.customizers:
            try:
                response = customizer(response, error)
            except Exception:
                logger.exception(
                    "Response customizer failed, skipping",
                    customizer=getattr(customizer, "__name__", repr(customizer)),
                )
        return response

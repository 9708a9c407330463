"""Exception handlers for FastAPI.

Routes every exception raised while handling a request through the
resolution engine, so all error responses share one JSON shape.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api_errors.shared.logging import get_logger

from .base import AppError
from .engine import ExceptionResolutionEngine

logger = get_logger(__name__)


def setup_exception_handlers(
    app: FastAPI,
    engine: ExceptionResolutionEngine,
    extra_classes: tuple[type[BaseException], ...] = (),
) -> None:
    """Register exception handlers in FastAPI application.

    Registers the engine for:
    - Application errors (AppError)
    - Validation errors (RequestValidationError)
    - HTTP errors (StarletteHTTPException)
    - Every class referenced by a registry rule, plus ``extra_classes``
    - Unexpected exceptions (Exception), the last line of defense

    Args:
        app: FastAPI application instance
        engine: Resolution engine built at startup
        extra_classes: Further exception classes to route to the engine
    """

    async def resolve_exception(request: Request, exc: Exception) -> JSONResponse:
        """Resolve the exception into a JSON error response."""
        return engine.render(exc)

    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        """Resolve an exception nothing else claimed.

        Starlette re-raises it after the response is sent, so the server
        still records the failure.
        """
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            error_type=type(exc).__name__,
        )
        return engine.render(exc)

    classes: dict[type[BaseException], None] = dict.fromkeys(
        (
            AppError,
            RequestValidationError,
            StarletteHTTPException,
            *engine.registry.exception_classes(),
            *(cls for handler in engine.handlers for cls in handler.handles),
            *extra_classes,
        )
    )
    classes.pop(Exception, None)
    classes.pop(BaseException, None)

    for exc_class in classes:
        app.add_exception_handler(exc_class, resolve_exception)

    app.add_exception_handler(Exception, unhandled_exception)
    logger.debug("Exception handlers registered", classes=len(classes) + 1)

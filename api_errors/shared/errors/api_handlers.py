"""Custom handlers for errors that need more than the default taxonomy.

A handler claims an error through ``can_handle`` and builds the whole
response, typically with structured detail such as field errors. Status,
code and message still go through the mappers, so registry rules can
override the handler's defaults.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from http import HTTPStatus
from typing import Any, ClassVar, cast

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .mappers import ErrorMappers
from .schemas import ApiErrorResponse, FieldError, GlobalError, ParameterError

PARAMETER_LOCATIONS = frozenset({"query", "path", "header", "cookie"})


class ApiExceptionHandler(ABC):
    """Base class for custom error handlers.

    Subclasses list the error classes they claim in ``handles`` or override
    ``can_handle`` for finer matching.
    """

    handles: ClassVar[tuple[type[BaseException], ...]] = ()

    def can_handle(self, error: BaseException) -> bool:
        return isinstance(error, self.handles)

    @abstractmethod
    def handle(self, error: BaseException, mappers: ErrorMappers) -> ApiErrorResponse:
        """Build the response for an error accepted by ``can_handle``."""


def _error_code(error_type: str) -> str:
    return re.sub(r"[^0-9A-Za-z]+", "_", error_type).strip("_").upper() or "INVALID"


def _phrase(status: int) -> str | None:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return None


def _rejected_value(item: dict[str, Any]) -> Any:
    # pydantic reports the enclosing object as input of a missing field
    if item.get("type") == "missing":
        return None
    return item.get("input")


def _split_errors(
    errors: Sequence[Any], has_location: bool
) -> tuple[list[FieldError], list[GlobalError], list[ParameterError]]:
    field_errors: list[FieldError] = []
    global_errors: list[GlobalError] = []
    parameter_errors: list[ParameterError] = []

    for item in errors:
        loc = tuple(str(part) for part in item.get("loc", ()))
        code = _error_code(str(item.get("type", "")))
        message = str(item.get("msg", ""))

        if has_location and loc and loc[0] in PARAMETER_LOCATIONS:
            parameter_errors.append(
                ParameterError(
                    code=code,
                    parameter=loc[-1] if len(loc) > 1 else loc[0],
                    message=message,
                    rejected_value=_rejected_value(item),
                )
            )
            continue

        path = loc[1:] if has_location and loc and loc[0] == "body" else loc
        if not path:
            global_errors.append(GlobalError(code=code, message=message))
            continue

        field_errors.append(
            FieldError(
                code=code,
                field=path[-1],
                message=message,
                rejected_value=_rejected_value(item),
                path=".".join(path),
            )
        )

    return field_errors, global_errors, parameter_errors


class RequestValidationHandler(ApiExceptionHandler):
    """FastAPI request validation failures.

    Unparseable JSON becomes ``MESSAGE_NOT_READABLE``; anything else
    ``VALIDATION_FAILED`` with field, parameter and global errors.
    """

    handles = (RequestValidationError,)

    def handle(self, error: BaseException, mappers: ErrorMappers) -> ApiErrorResponse:
        errors = list(cast(RequestValidationError, error).errors())
        status = mappers.status.status_for(error, default=400)

        if any(item.get("type") == "json_invalid" for item in errors):
            return ApiErrorResponse(
                http_status=status,
                code=mappers.code.code_for(error, default="MESSAGE_NOT_READABLE"),
                message=mappers.message.message_for(
                    error, default="Request body could not be read", own=False
                ),
            )

        field_errors, global_errors, parameter_errors = _split_errors(errors, has_location=True)
        return ApiErrorResponse(
            http_status=status,
            code=mappers.code.code_for(error, default="VALIDATION_FAILED"),
            message=mappers.message.message_for(
                error, default=f"Validation failed. Error count: {len(errors)}", own=False
            ),
            field_errors=tuple(field_errors),
            global_errors=tuple(global_errors),
            parameter_errors=tuple(parameter_errors),
        )


class PydanticValidationHandler(ApiExceptionHandler):
    """pydantic validation errors raised from application code."""

    handles = (PydanticValidationError,)

    def handle(self, error: BaseException, mappers: ErrorMappers) -> ApiErrorResponse:
        validation = cast(PydanticValidationError, error)
        field_errors, global_errors, _ = _split_errors(validation.errors(), has_location=False)
        return ApiErrorResponse(
            http_status=mappers.status.status_for(error, default=400),
            code=mappers.code.code_for(error, default="VALIDATION_FAILED"),
            message=mappers.message.message_for(
                error,
                default=(
                    f"Validation failed for object='{validation.title}'. "
                    f"Error count: {validation.error_count()}"
                ),
                own=False,
            ),
            field_errors=tuple(field_errors),
            global_errors=tuple(global_errors),
        )


class HttpExceptionHandler(ApiExceptionHandler):
    """Starlette/FastAPI ``HTTPException``: keeps its status and headers."""

    handles = (StarletteHTTPException,)

    @staticmethod
    def code_for_status(status: int) -> str:
        phrase = _phrase(status)
        return _error_code(phrase) if phrase else f"HTTP_{status}"

    def handle(self, error: BaseException, mappers: ErrorMappers) -> ApiErrorResponse:
        http_error = cast(StarletteHTTPException, error)
        status = mappers.status.status_for(error, default=http_error.status_code)
        return ApiErrorResponse(
            http_status=status,
            code=mappers.code.code_for(error, default=self.code_for_status(status)),
            message=mappers.message.message_for(error, default=_phrase(status)),
            headers=dict(http_error.headers or {}),
        )


class OptimisticLockingHandler(ApiExceptionHandler):
    """SQLAlchemy version-counter conflicts."""

    handles = (StaleDataError,)

    def handle(self, error: BaseException, mappers: ErrorMappers) -> ApiErrorResponse:
        return ApiErrorResponse(
            http_status=mappers.status.status_for(error, default=409),
            code=mappers.code.code_for(error, default="OPTIMISTIC_LOCKING_ERROR"),
            message=mappers.message.message_for(
                error, default="The resource was modified by another request", own=False
            ),
        )


def default_handlers() -> tuple[ApiExceptionHandler, ...]:
    """Built-in handlers, in the order they are consulted."""
    return (
        RequestValidationHandler(),
        PydanticValidationHandler(),
        HttpExceptionHandler(),
        OptimisticLockingHandler(),
    )

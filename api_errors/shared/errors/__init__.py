"""Shared errors package.

Translation of raised errors into structured JSON error responses.
"""

from .api_handlers import (
    ApiExceptionHandler,
    HttpExceptionHandler,
    OptimisticLockingHandler,
    PydanticValidationHandler,
    RequestValidationHandler,
    default_handlers,
)
from .base import AppError
from .builder import ResponseBodyBuilder
from .domain import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServiceUnavailableError,
)
from .engine import (
    ExceptionResolutionEngine,
    Resolution,
    ResolutionState,
    ResponseCustomizer,
)
from .handlers import setup_exception_handlers
from .logging_service import ErrorLoggingService
from .mappers import (
    DEFAULT_ERROR_CODE,
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_HTTP_STATUS,
    ErrorCodeMapper,
    ErrorMappers,
    ErrorMessageMapper,
    HttpStatusMapper,
)
from .registry import MappingRule, RuleRegistry, build_registry
from .schemas import ApiErrorResponse, FieldError, GlobalError, ParameterError

__all__ = [
    # Base
    "AppError",
    # Domain errors
    "BadRequestError",
    "NotFoundError",
    "ConflictError",
    "ServiceUnavailableError",
    # Registry
    "MappingRule",
    "RuleRegistry",
    "build_registry",
    # Mappers
    "HttpStatusMapper",
    "ErrorCodeMapper",
    "ErrorMessageMapper",
    "ErrorMappers",
    "DEFAULT_ERROR_CODE",
    "DEFAULT_ERROR_MESSAGE",
    "DEFAULT_HTTP_STATUS",
    # Custom handlers
    "ApiExceptionHandler",
    "RequestValidationHandler",
    "PydanticValidationHandler",
    "HttpExceptionHandler",
    "OptimisticLockingHandler",
    "default_handlers",
    # Engine
    "ExceptionResolutionEngine",
    "Resolution",
    "ResolutionState",
    "ResponseCustomizer",
    "ResponseBodyBuilder",
    "ErrorLoggingService",
    # FastAPI
    "setup_exception_handlers",
    # Schemas
    "ApiErrorResponse",
    "FieldError",
    "GlobalError",
    "ParameterError",
]

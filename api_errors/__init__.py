"""Structured JSON error responses for FastAPI applications.

Translates any exception raised while handling a request, and the failures
reported by the security layer, into ``{"code": ..., "message": ...}``
bodies with a resolved HTTP status.
"""

from api_errors.bootstrap import build_engine, setup_error_handling, setup_security
from api_errors.shared.logging import setup_logger
from api_errors.shared.errors import (
    ApiErrorResponse,
    ApiExceptionHandler,
    AppError,
    ExceptionResolutionEngine,
    MappingRule,
)

__all__ = [
    "ApiErrorResponse",
    "ApiExceptionHandler",
    "AppError",
    "ExceptionResolutionEngine",
    "MappingRule",
    "build_engine",
    "setup_error_handling",
    "setup_security",
    "setup_logger",
]

"""Standard domain error types.

Catalog of standard error types for use across an application.
"""

from .base import AppError


class BadRequestError(AppError):
    """Bad request - malformed or invalid."""

    status_code = 400


class NotFoundError(AppError):
    """Resource not found."""

    status_code = 404


class ConflictError(AppError):
    """Resource conflict or duplicate."""

    status_code = 409


class ServiceUnavailableError(AppError):
    """External service is unavailable."""

    status_code = 503

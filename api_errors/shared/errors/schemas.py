"""Pydantic models for error handling.

Data structures for resolved error responses and their details.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldError(BaseModel):
    """Validation error bound to a field of the request body."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    code: str
    field: str
    message: str
    rejected_value: Any | None = None
    path: str | None = None


class GlobalError(BaseModel):
    """Validation error bound to the object as a whole."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class ParameterError(BaseModel):
    """Validation error bound to a query/path/header/cookie parameter."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    code: str
    parameter: str
    message: str
    rejected_value: Any | None = None


class ApiErrorResponse(BaseModel):
    """Resolved error response: HTTP status plus the JSON body content."""

    model_config = ConfigDict(frozen=True)

    http_status: int = Field(..., ge=100, le=599)
    code: str = Field(..., min_length=1, description="Error code (UPPER_SNAKE_CASE)")
    message: str = Field(..., min_length=1, description="Human-readable error description")
    properties: dict[str, Any] = Field(default_factory=dict)
    field_errors: tuple[FieldError, ...] = ()
    global_errors: tuple[GlobalError, ...] = ()
    parameter_errors: tuple[ParameterError, ...] = ()
    headers: dict[str, str] = Field(default_factory=dict, exclude=True)

"""Assembly of the JSON error body.

The field names and their order are part of the public wire contract:
``code``, ``message``, optional ``status``, extra properties, then the
validation error lists.
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from api_errors.core.config import ErrorHandlingConfig
from api_errors.shared.logging import get_logger

from .schemas import ApiErrorResponse

logger = get_logger(__name__)

JSON_MEDIA_TYPE = "application/json"


class ResponseBodyBuilder:
    """Build the serializable body of an error response."""

    def __init__(self, config: ErrorHandlingConfig) -> None:
        self._names = config.json_field_names
        self._include_status = config.http_status_in_json_response

    @property
    def reserved_keys(self) -> frozenset[str]:
        names = self._names
        return frozenset(
            {
                names.code,
                names.message,
                names.status,
                names.field_errors,
                names.global_errors,
                names.parameter_errors,
            }
        )

    def build(self, response: ApiErrorResponse) -> dict[str, Any]:
        names = self._names
        body: dict[str, Any] = {
            names.code: response.code,
            names.message: response.message,
        }
        if self._include_status:
            body[names.status] = response.http_status

        reserved = self.reserved_keys
        for key, value in response.properties.items():
            if key in reserved:
                logger.warning(
                    "Error property clashes with a reserved field, skipping",
                    property=key,
                    code=response.code,
                )
                continue
            body[key] = jsonable_encoder(value)

        if response.field_errors:
            body[names.field_errors] = [
                _dump(error, exclude_none_keys=("path",)) for error in response.field_errors
            ]
        if response.global_errors:
            body[names.global_errors] = [
                error.model_dump(mode="json") for error in response.global_errors
            ]
        if response.parameter_errors:
            body[names.parameter_errors] = [_dump(error) for error in response.parameter_errors]
        return body


def _dump(error: BaseModel, exclude_none_keys: tuple[str, ...] = ()) -> dict[str, Any]:
    """Dump a validation error with camelCase keys, keeping a null rejectedValue."""
    data = error.model_dump(by_alias=True, mode="json")
    for key in exclude_none_keys:
        if data.get(key) is None:
            data.pop(key, None)
    return data

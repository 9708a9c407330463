"""Unit tests for the built-in custom handlers."""

import pytest
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException

from api_errors.shared.errors import (
    ErrorMappers,
    HttpExceptionHandler,
    MappingRule,
    OptimisticLockingHandler,
    PydanticValidationHandler,
    RequestValidationHandler,
    RuleRegistry,
)


class Deck(BaseModel):
    name: str
    card_limit: int


@pytest.fixture
def mappers(config) -> ErrorMappers:
    return ErrorMappers.create(RuleRegistry(), config)


class TestRequestValidationHandler:
    """Tests for RequestValidationHandler."""

    def test_splits_body_parameter_and_global_errors(self, mappers):
        error = RequestValidationError(
            [
                {"type": "missing", "loc": ("body", "name"), "msg": "Field required", "input": {}},
                {
                    "type": "int_parsing",
                    "loc": ("body", "settings", "card_limit"),
                    "msg": "Input should be a valid integer",
                    "input": "many",
                },
                {"type": "missing", "loc": ("query", "page"), "msg": "Field required"},
                {"type": "value_error", "loc": ("body",), "msg": "Value error, bad deck"},
            ]
        )
        handler = RequestValidationHandler()
        assert handler.can_handle(error)

        response = handler.handle(error, mappers)

        assert response.http_status == 400
        assert response.code == "VALIDATION_FAILED"
        assert response.message == "Validation failed. Error count: 4"
        assert [(e.code, e.field, e.path) for e in response.field_errors] == [
            ("MISSING", "name", "name"),
            ("INT_PARSING", "card_limit", "settings.card_limit"),
        ]
        assert response.field_errors[0].rejected_value is None
        assert response.field_errors[1].rejected_value == "many"
        assert [(e.code, e.parameter) for e in response.parameter_errors] == [("MISSING", "page")]
        assert [e.code for e in response.global_errors] == ["VALUE_ERROR"]

    def test_invalid_json_is_not_readable(self, mappers):
        error = RequestValidationError(
            [{"type": "json_invalid", "loc": ("body", 1), "msg": "JSON decode error"}]
        )
        response = RequestValidationHandler().handle(error, mappers)
        assert response.http_status == 400
        assert response.code == "MESSAGE_NOT_READABLE"
        assert not response.field_errors

    def test_registry_overrides_status_and_code(self, config):
        registry = RuleRegistry(
            [MappingRule(RequestValidationError, status=422, code="INVALID_INPUT")]
        )
        error = RequestValidationError([{"type": "missing", "loc": ("body", "x"), "msg": "m"}])
        response = RequestValidationHandler().handle(error, ErrorMappers.create(registry, config))
        assert (response.http_status, response.code) == (422, "INVALID_INPUT")


class TestPydanticValidationHandler:
    """Tests for PydanticValidationHandler."""

    def test_model_errors_become_field_errors(self, mappers):
        with pytest.raises(ValidationError) as exc_info:
            Deck.model_validate({"card_limit": "lots"})

        response = PydanticValidationHandler().handle(exc_info.value, mappers)

        assert response.http_status == 400
        assert response.code == "VALIDATION_FAILED"
        assert response.message == "Validation failed for object='Deck'. Error count: 2"
        assert {(e.code, e.field) for e in response.field_errors} == {
            ("MISSING", "name"),
            ("INT_PARSING", "card_limit"),
        }


class TestHttpExceptionHandler:
    """Tests for HttpExceptionHandler."""

    @pytest.mark.parametrize(
        ("status", "code"),
        [(404, "NOT_FOUND"), (405, "METHOD_NOT_ALLOWED"), (418, "I_M_A_TEAPOT"), (599, "HTTP_599")],
    )
    def test_code_for_status(self, status, code):
        assert HttpExceptionHandler.code_for_status(status) == code

    def test_keeps_status_detail_and_headers(self, mappers):
        error = HTTPException(
            status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"}
        )
        response = HttpExceptionHandler().handle(error, mappers)
        assert response.http_status == 401
        assert response.code == "UNAUTHORIZED"
        assert response.message == "Not authenticated"
        assert response.headers == {"WWW-Authenticate": "Bearer"}


class TestOptimisticLockingHandler:
    """Tests for OptimisticLockingHandler."""

    def test_stale_data_is_conflict(self, mappers):
        error = StaleDataError("UPDATE statement on table 'decks' expected to update 1 row(s)")
        response = OptimisticLockingHandler().handle(error, mappers)
        assert response.http_status == 409
        assert response.code == "OPTIMISTIC_LOCKING_ERROR"
        assert "decks" not in response.message

"""Unit tests for ErrorLoggingService."""

import pytest

from api_errors.core.config import ErrorHandlingConfig, ExceptionLogging
from api_errors.shared.errors import ApiErrorResponse, ErrorLoggingService


def make_response(status: int) -> ApiErrorResponse:
    return ApiErrorResponse(http_status=status, code="SOME_CODE", message="Some message")


def make_service(**kwargs) -> ErrorLoggingService:
    return ErrorLoggingService(ErrorHandlingConfig(_env_file=None, **kwargs))


class TestLevelFor:
    """Tests for log level selection."""

    @pytest.mark.parametrize(("status", "level"), [(500, "ERROR"), (503, "ERROR"), (404, "WARNING")])
    def test_default_levels(self, status, level):
        assert make_service().level_for(status) == level

    def test_exact_status_beats_family(self):
        service = make_service(log_levels={"4xx": "info", "404": "debug"})
        assert service.level_for(404) == "DEBUG"
        assert service.level_for(403) == "INFO"
        assert service.level_for(500) == "ERROR"


class TestWantsStacktrace:
    """Tests for stack trace selection."""

    def test_message_only_by_default(self):
        assert not make_service().wants_stacktrace(make_response(500), RuntimeError())

    def test_with_stacktrace_mode(self):
        service = make_service(exception_logging=ExceptionLogging.WITH_STACKTRACE)
        assert service.wants_stacktrace(make_response(400), ValueError())

    def test_status_family_listed(self):
        service = make_service(full_stacktrace_http_statuses={"5XX"})
        assert service.wants_stacktrace(make_response(502), RuntimeError())
        assert not service.wants_stacktrace(make_response(404), RuntimeError())

    def test_class_listed_matches_subclasses(self):
        service = make_service(full_stacktrace_classes={"LookupError"})
        assert service.wants_stacktrace(make_response(500), KeyError("k"))
        assert not service.wants_stacktrace(make_response(500), ValueError())


class TestLog:
    """Tests for ErrorLoggingService.log."""

    def test_logs_code_and_error(self, log_messages):
        make_service().log(make_response(503), RuntimeError("db down"))
        assert any(str(m).startswith("ERROR|SOME_CODE: db down") for m in log_messages)

    def test_no_logging(self, log_messages):
        make_service(exception_logging=ExceptionLogging.NO_LOGGING).log(
            make_response(500), RuntimeError("quiet")
        )
        assert not any("quiet" in str(m) for m in log_messages)

    def test_stacktrace_attached(self, log_messages):
        service = make_service(exception_logging=ExceptionLogging.WITH_STACKTRACE)
        try:
            raise RuntimeError("with trace")
        except RuntimeError as e:
            service.log(make_response(500), e)

        records = [m.record for m in log_messages if "with trace" in m.record["message"]]
        assert records
        assert records[0]["exception"] is not None

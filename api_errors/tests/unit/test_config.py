"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from api_errors.core.config import (
    AppConfig,
    ErrorCodeStrategy,
    ErrorHandlingConfig,
    ExceptionLogging,
    LoggingConfig,
    Settings,
    get_settings,
)


class TestErrorHandlingConfig:
    """Tests for ErrorHandlingConfig."""

    def test_default_values(self):
        config = ErrorHandlingConfig(_env_file=None)
        assert config.enabled is True
        assert config.default_error_code_strategy is ErrorCodeStrategy.FALLBACK
        assert config.http_status_in_json_response is False
        assert config.exception_logging is ExceptionLogging.MESSAGE_ONLY
        assert config.codes == {}
        assert config.json_field_names.code == "code"
        assert config.json_field_names.field_errors == "fieldErrors"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ERROR_HANDLING_ENABLED", "false")
        monkeypatch.setenv("ERROR_HANDLING_DEFAULT_ERROR_CODE_STRATEGY", "all_caps")
        monkeypatch.setenv("ERROR_HANDLING_CODES", '{"OrderLockedError": "ORDER_LOCKED"}')
        monkeypatch.setenv("ERROR_HANDLING_HTTP_STATUSES", '{"OrderLockedError": 423}')
        monkeypatch.setenv("ERROR_HANDLING_JSON_FIELD_NAMES__CODE", "errorCode")

        config = ErrorHandlingConfig(_env_file=None)

        assert config.enabled is False
        assert config.default_error_code_strategy is ErrorCodeStrategy.ALL_CAPS
        assert config.codes == {"OrderLockedError": "ORDER_LOCKED"}
        assert config.http_statuses == {"OrderLockedError": 423}
        assert config.json_field_names.code == "errorCode"

    def test_log_levels_are_normalized(self):
        config = ErrorHandlingConfig(
            _env_file=None, log_levels={"4XX": " warning ", "500": "critical"}
        )
        assert config.log_levels == {"4xx": "WARNING", "500": "CRITICAL"}

    @pytest.mark.parametrize("level", ["WARN", "verbose", ""])
    def test_unknown_log_level_is_rejected(self, level):
        with pytest.raises(ValidationError, match="Unknown log level"):
            ErrorHandlingConfig(_env_file=None, log_levels={"4xx": level})


class TestSettings:
    """Tests for the Settings aggregator."""

    def test_sections(self):
        settings = Settings()
        assert isinstance(settings.error_handling, ErrorHandlingConfig)
        assert isinstance(settings.logging, LoggingConfig)
        assert isinstance(settings.app, AppConfig)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

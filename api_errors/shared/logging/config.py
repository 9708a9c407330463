"""Logger configuration.

Every module logs through ``get_logger(__name__)``. ``setup_logger`` installs
one sink: human-readable console lines, or JSON lines (``LOG_FORMAT=json``)
where the fields bound by the error logging service are grouped under
``error``.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import TYPE_CHECKING, Any, TextIO

from loguru import logger

if TYPE_CHECKING:
    from api_errors.core.config import Settings

REDACTED = "***REDACTED***"

# Extra keys never written as-is; error properties may carry request data
_SECRET_KEY = re.compile(r"password|token|secret|credential|api_key|authorization|cookie", re.I)

# Extra keys describing the resolved error
ERROR_FIELDS = ("http_status", "code", "error_type")

FRAMEWORK_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "starlette")

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Forward standard ``logging`` records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def redact(extra: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``extra`` with secret-looking keys masked."""
    return {
        key: REDACTED if _SECRET_KEY.search(key) else value for key, value in extra.items()
    }


def format_json_record(record: dict[str, Any], service: str) -> str:
    """Serialize a loguru record into one JSON line."""
    extra = redact({k: v for k, v in record["extra"].items() if k != "name"})
    entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "service": service,
        "logger": record["extra"].get("name") or record["name"],
        "message": record["message"],
    }

    error = {key: extra.pop(key) for key in ERROR_FIELDS if key in extra}
    if record["exception"] is not None:
        exc = record["exception"]
        error["exception"] = exc.type.__name__ if exc.type else None
    if error:
        entry["error"] = error
    entry.update(extra)

    return json.dumps(entry, ensure_ascii=False, default=str)


def json_sink(service: str, stream: TextIO | None = None) -> Any:
    """Loguru sink writing JSON lines to ``stream`` (stdout by default)."""

    def sink(message: Any) -> None:
        out = stream or sys.stdout
        out.write(format_json_record(message.record, service) + "\n")
        out.flush()

    return sink


def setup_logger(settings: Settings | None = None, stream: TextIO | None = None) -> None:
    """Replace loguru's default sink according to ``LoggingConfig``."""
    if settings is None:
        from api_errors.core.config import get_settings

        settings = get_settings()

    level = settings.logging.level.upper()
    as_json = settings.logging.format.lower() == "json"

    logger.remove()
    logger.configure(extra={"name": ""})
    if as_json:
        logger.add(json_sink(settings.app.name, stream), level=level, diagnose=False)
    else:
        logger.add(
            stream or sys.stdout,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=stream is None,
            diagnose=settings.app.debug,
        )

    configure_third_party_loggers()
    logger.debug("Logger configured", level=level, json=as_json)


def configure_third_party_loggers() -> None:
    """Route uvicorn, fastapi and starlette logs through loguru."""
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)
    for name in FRAMEWORK_LOGGERS:
        framework_logger = logging.getLogger(name)
        framework_logger.handlers = [InterceptHandler()]
        framework_logger.propagate = False


def get_logger(name: str):
    """Loguru logger bound to a module name."""
    return logger.bind(name=name)

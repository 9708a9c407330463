"""Wiring of error handling into a FastAPI application.

Everything here runs once at startup; the engine and registry it builds are
read-only for the lifetime of the process.
"""

from collections.abc import Iterable, Sequence

from fastapi import FastAPI

from api_errors.core.config import Settings, get_settings
from api_errors.modules.security import (
    SECURITY_RULES,
    AccessDeniedHandler,
    AccessRule,
    PrincipalResolver,
    SecurityError,
    SecurityMiddleware,
    UnauthenticatedEntryPoint,
    scope_principal_resolver,
)
from api_errors.shared.errors import (
    ApiExceptionHandler,
    ExceptionResolutionEngine,
    MappingRule,
    ResponseCustomizer,
    build_registry,
    default_handlers,
    setup_exception_handlers,
)
from api_errors.shared.logging import get_logger

logger = get_logger(__name__)


def build_engine(
    settings: Settings | None = None,
    rules: Iterable[MappingRule] = (),
    handlers: Iterable[ApiExceptionHandler] | None = None,
    customizers: Iterable[ResponseCustomizer] = (),
) -> ExceptionResolutionEngine:
    """Build the resolution engine.

    Args:
        settings: Settings to use; the cached settings when omitted
        rules: Application rules, taking priority over configuration and
            built-in security rules
        handlers: Custom handlers, consulted before the built-in ones
        customizers: Response customizers, applied in order

    Returns:
        Engine ready to be shared by all requests
    """
    settings = settings or get_settings()
    config = settings.error_handling
    registry = build_registry(config, app_rules=rules, builtin_rules=SECURITY_RULES)
    engine = ExceptionResolutionEngine(
        registry=registry,
        config=config,
        handlers=(*(handlers or ()), *default_handlers()),
        customizers=customizers,
    )
    logger.info(
        "Error handling engine built",
        rules=len(registry),
        handlers=len(engine.handlers),
        customizers=len(engine.customizers),
    )
    return engine


def setup_error_handling(
    app: FastAPI,
    settings: Settings | None = None,
    rules: Iterable[MappingRule] = (),
    handlers: Iterable[ApiExceptionHandler] | None = None,
    customizers: Iterable[ResponseCustomizer] = (),
) -> ExceptionResolutionEngine:
    """Build the engine and register it as the app's exception handler.

    The engine is also stored on ``app.state.error_engine``. When error
    handling is disabled in configuration, FastAPI's own handlers stay in
    place.
    """
    settings = settings or get_settings()
    engine = build_engine(settings, rules=rules, handlers=handlers, customizers=customizers)
    app.state.error_engine = engine

    if not settings.error_handling.enabled:
        logger.warning("Error handling disabled by configuration")
        return engine

    setup_exception_handlers(app, engine, extra_classes=(SecurityError,))
    return engine


def setup_security(
    app: FastAPI,
    engine: ExceptionResolutionEngine,
    rules: Sequence[AccessRule] = (),
    principal_resolver: PrincipalResolver = scope_principal_resolver,
    authenticated_by_default: bool = True,
) -> None:
    """Install ``SecurityMiddleware`` with adapters backed by ``engine``."""
    app.add_middleware(
        SecurityMiddleware,
        entry_point=UnauthenticatedEntryPoint(engine),
        access_denied_handler=AccessDeniedHandler(engine),
        rules=rules,
        principal_resolver=principal_resolver,
        authenticated_by_default=authenticated_by_default,
    )
    logger.debug("Security middleware installed", rules=len(rules))

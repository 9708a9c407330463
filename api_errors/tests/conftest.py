"""Pytest configuration and fixtures for api_errors tests."""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient
from loguru import logger
from pydantic import BaseModel, Field

from api_errors.bootstrap import setup_error_handling, setup_security
from api_errors.core.config import ErrorHandlingConfig, Settings
from api_errors.modules.security import (
    AccessDeniedError,
    AccessRule,
    AccountExpiredError,
    Principal,
    Secured,
)
from api_errors.modules.security.rules import SECURITY_RULES
from api_errors.shared.errors import (
    ExceptionResolutionEngine,
    NotFoundError,
    build_registry,
    default_handlers,
)

# ==================== Settings Fixtures ====================


def make_settings(**error_handling: Any) -> Settings:
    """Settings that ignore the environment and any .env file."""
    settings = Settings()
    settings.error_handling = ErrorHandlingConfig(_env_file=None, **error_handling)
    return settings


@pytest.fixture
def config() -> ErrorHandlingConfig:
    """Default error handling configuration."""
    return ErrorHandlingConfig(_env_file=None)


@pytest.fixture
def engine(config: ErrorHandlingConfig) -> ExceptionResolutionEngine:
    """Engine with the built-in security rules and handlers."""
    registry = build_registry(config, builtin_rules=SECURITY_RULES)
    return ExceptionResolutionEngine(registry, config, handlers=default_handlers())


# ==================== Logging Fixtures ====================


@pytest.fixture
def log_messages() -> Generator[list[Any], None, None]:
    """Collect loguru messages emitted during a test."""
    messages: list[Any] = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level}|{message}")
    yield messages
    logger.remove(handler_id)


# ==================== Application Fixtures ====================


def header_principal_resolver(request: Request) -> Principal | None:
    """Test authentication: ``X-User`` and comma separated ``X-Roles`` headers."""
    name = request.headers.get("X-User")
    if not name:
        return None
    roles = request.headers.get("X-Roles", "USER")
    return Principal(name=name, roles=frozenset(r.strip() for r in roles.split(",") if r.strip()))


class ItemCreate(BaseModel):
    name: str = Field(min_length=1)
    quantity: int


def create_security_app(settings: Settings | None = None) -> FastAPI:
    """Application with protected routes, declarative and global role checks."""
    app = FastAPI()
    engine = setup_error_handling(app, settings or make_settings())
    setup_security(
        app,
        engine,
        rules=[
            AccessRule(pattern="/public/**", permit_all=True),
            AccessRule(pattern="/test/security/admin-global", roles=("ADMIN",)),
        ],
        principal_resolver=header_principal_resolver,
    )

    @app.get("/test/security/access-denied")
    async def throw_access_denied() -> None:
        raise AccessDeniedError("Fake access denied")

    @app.get("/test/security/account-expired")
    async def throw_account_expired() -> None:
        raise AccountExpiredError("Fake account expired")

    @app.get("/test/security/admin", dependencies=[Depends(Secured("ADMIN"))])
    async def requires_admin_role() -> None:
        return None

    @app.get("/test/security/admin-global")
    async def requires_admin_role_via_global_rule() -> None:
        return None

    @app.get("/public/ping")
    async def ping() -> dict[str, str]:
        return {"status": "ok"}

    return app


def create_error_app(settings: Settings | None = None) -> FastAPI:
    """Application raising assorted errors, without security."""
    app = FastAPI()
    setup_error_handling(app, settings or make_settings())

    @app.post("/items")
    async def create_item(item: ItemCreate) -> dict[str, Any]:
        return item.model_dump()

    @app.get("/items/{item_id}")
    async def get_item(item_id: int) -> None:
        raise NotFoundError(f"Item {item_id} not found", details={"resource_id": item_id})

    @app.get("/search")
    async def search(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("connection string postgres://secret@db")

    @app.get("/value-error")
    async def value_error() -> None:
        raise ValueError()

    return app


@pytest.fixture
def security_client() -> TestClient:
    return TestClient(create_security_app(), raise_server_exceptions=False)


@pytest.fixture
def error_client_factory() -> Callable[..., TestClient]:
    def factory(**error_handling: Any) -> TestClient:
        return TestClient(
            create_error_app(make_settings(**error_handling)),
            raise_server_exceptions=False,
        )

    return factory

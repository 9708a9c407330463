"""Security module.

Security failure adapters, exceptions, built-in mapping rules and
authorization hooks for FastAPI.
"""

from .adapters import AccessDeniedHandler, UnauthenticatedEntryPoint
from .dependencies import Secured, get_current_principal
from .exceptions import (
    AccessDeniedError,
    AccountExpiredError,
    AccountStatusError,
    AuthenticationError,
    AuthorizationDeniedError,
    BadCredentialsError,
    CredentialsExpiredError,
    DisabledError,
    InsufficientAuthenticationError,
    LockedError,
    SecurityError,
)
from .middleware import SecurityMiddleware, scope_principal_resolver
from .rules import ACCESS_DENIED_MESSAGE, SECURITY_RULES, UNAUTHENTICATED_MESSAGE
from .schemas import AccessRule, Principal, PrincipalResolver

__all__ = [
    # Adapters
    "UnauthenticatedEntryPoint",
    "AccessDeniedHandler",
    # Middleware and dependencies
    "SecurityMiddleware",
    "scope_principal_resolver",
    "Secured",
    "get_current_principal",
    # Schemas
    "Principal",
    "PrincipalResolver",
    "AccessRule",
    # Exceptions
    "SecurityError",
    "AuthenticationError",
    "InsufficientAuthenticationError",
    "BadCredentialsError",
    "AccountStatusError",
    "AccountExpiredError",
    "CredentialsExpiredError",
    "DisabledError",
    "LockedError",
    "AccessDeniedError",
    "AuthorizationDeniedError",
    # Rules
    "SECURITY_RULES",
    "UNAUTHENTICATED_MESSAGE",
    "ACCESS_DENIED_MESSAGE",
]

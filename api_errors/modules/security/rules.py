"""Built-in mapping rules for security failures.

Subclasses without their own entry inherit status, code or message from the
nearest listed base class.
"""

from api_errors.shared.errors import MappingRule

from .exceptions import (
    AccessDeniedError,
    AccountExpiredError,
    AccountStatusError,
    AuthenticationError,
    AuthorizationDeniedError,
    BadCredentialsError,
    CredentialsExpiredError,
    DisabledError,
    LockedError,
)

UNAUTHENTICATED_MESSAGE = "Full authentication is required to access this resource"
ACCESS_DENIED_MESSAGE = "Access Denied"

SECURITY_RULES: tuple[MappingRule, ...] = (
    MappingRule(AuthenticationError, status=401, code="UNAUTHORIZED", message=UNAUTHENTICATED_MESSAGE),
    MappingRule(BadCredentialsError, status=401, code="BAD_CREDENTIALS", message="Bad credentials"),
    MappingRule(AccountStatusError, status=400),
    MappingRule(AccountExpiredError, code="ACCOUNT_EXPIRED", message="User account has expired"),
    MappingRule(
        CredentialsExpiredError,
        code="CREDENTIALS_EXPIRED",
        message="User credentials have expired",
    ),
    MappingRule(DisabledError, code="DISABLED", message="User is disabled"),
    MappingRule(LockedError, code="LOCKED", message="User account is locked"),
    MappingRule(AccessDeniedError, status=403, code="ACCESS_DENIED", message=ACCESS_DENIED_MESSAGE),
    MappingRule(AuthorizationDeniedError, code="AUTHORIZATION_DENIED"),
)

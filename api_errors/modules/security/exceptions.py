"""Security failure signals.

Raised by the authorization hooks (or by application code) and resolved
through the mapping registry like any other error. Status, code and default
message live in ``rules.py``, not on the classes.
"""


class SecurityError(Exception):
    """Base class for authentication and authorization failures."""

    def __init__(self, message: str | None = None) -> None:
        self.message = message or ""
        super().__init__(self.message)


class AuthenticationError(SecurityError):
    """The caller could not be authenticated."""


class InsufficientAuthenticationError(AuthenticationError):
    """No (or not enough) credentials were presented."""


class BadCredentialsError(AuthenticationError):
    """Presented credentials are invalid."""


class AccountStatusError(AuthenticationError):
    """The account exists but is not in a usable state."""


class AccountExpiredError(AccountStatusError):
    """The account has expired."""


class CredentialsExpiredError(AccountStatusError):
    """The account credentials have expired."""


class DisabledError(AccountStatusError):
    """The account is disabled."""


class LockedError(AccountStatusError):
    """The account is locked."""


class AccessDeniedError(SecurityError):
    """Authenticated principal lacks the required authority."""


class AuthorizationDeniedError(AccessDeniedError):
    """Declarative per-route role check failed."""

"""FastAPI dependencies for per-route authorization."""

from typing import Annotated

from fastapi import Depends, Request

from .exceptions import AuthorizationDeniedError, InsufficientAuthenticationError
from .schemas import Principal


async def get_current_principal(request: Request) -> Principal:
    """Dependency to get the authenticated principal.

    Reads the principal stored by ``SecurityMiddleware``.

    Raises:
        InsufficientAuthenticationError: no principal on the request.
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise InsufficientAuthenticationError()
    return principal


class Secured:
    """Declarative role check for a single route.

    Usage:
        @router.get("/admin", dependencies=[Depends(Secured("ADMIN"))])
        async def admin_only() -> None:
            ...

    Raises ``AuthorizationDeniedError`` when the principal has none of the
    roles; the error goes through the regular exception handlers.
    """

    def __init__(self, *roles: str) -> None:
        self.roles = roles

    async def __call__(
        self, principal: Annotated[Principal, Depends(get_current_principal)]
    ) -> Principal:
        if not principal.has_any_role(self.roles):
            raise AuthorizationDeniedError()
        return principal

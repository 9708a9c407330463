"""Route-level authorization middleware."""

from collections.abc import Awaitable, Callable, Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from api_errors.shared.logging import get_logger

from .adapters import AccessDeniedHandler, UnauthenticatedEntryPoint
from .exceptions import AccessDeniedError, AuthenticationError
from .schemas import AccessRule, Principal, PrincipalResolver

logger = get_logger(__name__)


def scope_principal_resolver(request: Request) -> Principal | None:
    """Read the principal placed in the ASGI scope by the authentication layer.

    Accepts either a ``Principal`` under ``scope["principal"]`` or the
    ``user``/``auth`` pair set by Starlette's ``AuthenticationMiddleware``.
    """
    principal = request.scope.get("principal")
    if isinstance(principal, Principal):
        return principal

    user = request.scope.get("user")
    if user is not None and getattr(user, "is_authenticated", False):
        auth = request.scope.get("auth")
        return Principal(
            name=getattr(user, "display_name", "") or "",
            roles=frozenset(getattr(auth, "scopes", ()) or ()),
        )
    return None


class SecurityMiddleware(BaseHTTPMiddleware):
    """Apply global access rules before a request reaches its route.

    The first rule whose pattern matches the path decides. A request without
    a principal goes to the entry point (401) unless the rule permits all;
    a principal without any of the rule's roles goes to the access-denied
    handler (403). Paths no rule matches only require authentication, unless
    ``authenticated_by_default`` is off.
    """

    def __init__(
        self,
        app: ASGIApp,
        entry_point: UnauthenticatedEntryPoint,
        access_denied_handler: AccessDeniedHandler,
        rules: Sequence[AccessRule] = (),
        principal_resolver: PrincipalResolver = scope_principal_resolver,
        authenticated_by_default: bool = True,
    ) -> None:
        super().__init__(app)
        self.entry_point = entry_point
        self.access_denied_handler = access_denied_handler
        self.rules: tuple[AccessRule, ...] = tuple(rules)
        self.principal_resolver = principal_resolver
        self.authenticated_by_default = authenticated_by_default

    def rule_for(self, path: str) -> AccessRule | None:
        return next((rule for rule in self.rules if rule.matches(path)), None)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            principal = self.principal_resolver(request)
        except AuthenticationError as e:
            return await self.entry_point.commence(request, e)

        request.state.principal = principal
        rule = self.rule_for(request.url.path)

        if rule is not None and rule.permit_all:
            return await call_next(request)

        if rule is None and not self.authenticated_by_default:
            return await call_next(request)

        if principal is None:
            return await self.entry_point.commence(request)

        if rule is not None and not principal.has_any_role(rule.roles):
            logger.info(
                "Route rule denied access",
                path=request.url.path,
                principal=principal.name,
                required_roles=list(rule.roles),
            )
            return await self.access_denied_handler.handle(request, AccessDeniedError())

        return await call_next(request)

"""Security failure adapters.

Entry points for failures the security layer detects before any route
handler runs. Both resolve the failure through the same engine as handler
errors, so the JSON body is identical whichever path produced it.
"""

from starlette.requests import Request
from starlette.responses import Response

from api_errors.shared.errors import ExceptionResolutionEngine
from api_errors.shared.logging import get_logger

from .exceptions import AccessDeniedError, AuthenticationError, InsufficientAuthenticationError

logger = get_logger(__name__)


class UnauthenticatedEntryPoint:
    """Respond to a request for a protected resource without credentials."""

    default_status = 401

    def __init__(self, engine: ExceptionResolutionEngine) -> None:
        self._engine = engine

    async def commence(
        self, request: Request, error: AuthenticationError | None = None
    ) -> Response:
        """Write the 401 response.

        Args:
            request: The rejected request
            error: Authentication failure reported by the security layer;
                ``InsufficientAuthenticationError`` when none is given

        Returns:
            JSON error response
        """
        if error is None:
            error = InsufficientAuthenticationError()
        logger.debug(
            "Unauthenticated access rejected",
            path=request.url.path,
            error_type=type(error).__name__,
        )
        return self._engine.render(error, default_status=self.default_status)

    __call__ = commence


class AccessDeniedHandler:
    """Respond to an authenticated principal lacking the required authority.

    The concrete error class is kept, so a declarative route check
    (``AuthorizationDeniedError``) and any other denial (``AccessDeniedError``)
    resolve to different codes.
    """

    default_status = 403

    def __init__(self, engine: ExceptionResolutionEngine) -> None:
        self._engine = engine

    async def handle(self, request: Request, error: AccessDeniedError) -> Response:
        logger.debug(
            "Access denied",
            path=request.url.path,
            error_type=type(error).__name__,
        )
        return self._engine.render(error, default_status=self.default_status)

    __call__ = handle

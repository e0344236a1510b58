"""Session cookie enforcement for every non-public route."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.exceptions import SessionExpiredError
from auth.session import SessionManager

SESSION_COOKIE = "session_token"


def _unauthorized(request: Request, code: str, message: str) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=401,
        content=error_response(code, message, request_id).model_dump(mode="json"),
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """Admits a request only with a live session.

    The invoice dashboard, its form actions and the upload endpoint all sit
    behind this. Validation slides the session's expiry forward; the session
    and its user_id are exposed on request.state.
    """

    PUBLIC_PATHS = (
        "/login",
        "/logout",
        "/health",
        "/docs",
        "/openapi.json",
    )

    def __init__(self, app, session_manager: SessionManager):
        super().__init__(app)
        self._session_manager = session_manager

    def is_public(self, path: str) -> bool:
        """Exact public path or anything beneath it."""
        return any(path == p or path.startswith(f"{p}/") for p in self.PUBLIC_PATHS)

    async def dispatch(self, request: Request, call_next):
        if self.is_public(request.url.path):
            return await call_next(request)

        token = request.cookies.get(SESSION_COOKIE)
        if not token:
            return _unauthorized(request, ErrorCodes.NOT_AUTHENTICATED, "Sign in to continue")

        try:
            session = self._session_manager.validate_session(token)
        except SessionExpiredError:
            return _unauthorized(request, ErrorCodes.SESSION_EXPIRED, "Session has expired, sign in again")

        request.state.session = session
        request.state.user_id = session.user_id
        return await call_next(request)

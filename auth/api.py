"""HTTP routes for authentication."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from auth.actions import authenticate
from auth.config import AuthConfig
from auth.security_middleware import SESSION_COOKIE
from auth.service import AuthService

LOGIN_REDIRECT = "/dashboard/invoices"


def create_auth_router(auth_service: AuthService, config: AuthConfig) -> APIRouter:
    """Create auth router with injected service."""
    router = APIRouter(tags=["auth"])

    @router.post("/login")
    async def login(request: Request):
        """Sign in from the login form.

        Sets the session_token cookie and redirects to the invoice list, or
        returns 401 with {message} for the form to display.
        """
        form = await request.form()
        result = authenticate(auth_service, form)

        if result.error is not None:
            return JSONResponse(status_code=401, content={"message": result.error})

        session = result.authenticated.session
        response = RedirectResponse(LOGIN_REDIRECT, status_code=status.HTTP_303_SEE_OTHER)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=session.token,
            httponly=True,
            secure=config.cookie_secure,
            samesite="lax",
            max_age=int((session.expires_at - session.created_at).total_seconds()),
        )
        return response

    @router.post("/logout")
    async def logout(request: Request):
        """Revoke session and clear cookie."""
        session_token = request.cookies.get(SESSION_COOKIE)
        if session_token:
            auth_service.logout(session_token)

        response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
        response.delete_cookie(key=SESSION_COOKIE)
        return response

    return router

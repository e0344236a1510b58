"""Login form action."""

from dataclasses import dataclass
from typing import Any, Mapping

from auth.exceptions import AuthError, CredentialsSignin
from auth.service import AuthService
from auth.types import AuthenticatedUser

INVALID_CREDENTIALS = "Invalid credentials."
GENERIC_FAILURE = "Something went wrong."


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a login form submission: a signed-in user or an error message."""

    authenticated: AuthenticatedUser | None = None
    error: str | None = None


def authenticate(auth_service: AuthService, form: Mapping[str, Any]) -> AuthResult:
    """
    Sign in with the login form's email and password.

    Auth failures become a message for the form. Anything that is not an
    AuthError propagates to the caller.
    """
    try:
        authenticated = auth_service.sign_in(form.get("email"), form.get("password"))
    except AuthError as e:
        if e.type == CredentialsSignin.type:
            return AuthResult(error=INVALID_CREDENTIALS)
        return AuthResult(error=GENERIC_FAILURE)

    return AuthResult(authenticated=authenticated)

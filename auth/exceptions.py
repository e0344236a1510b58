"""Typed exceptions for auth failures.

Each error carries a short `type` string. Sign-in callers branch on it to
pick the message shown on the login form.
"""


class AuthError(Exception):
    """Base class for authentication errors."""

    type = "AuthError"


class CredentialsSignin(AuthError):
    """Email/password pair did not match an account."""

    type = "CredentialsSignin"


class UserInactiveError(AuthError):
    """User account is deactivated. Login not permitted."""

    type = "AccessDenied"


class SessionExpiredError(AuthError):
    """Session is missing or expired; user must sign in again."""

    type = "SessionExpired"

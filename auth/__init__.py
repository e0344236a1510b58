"""Authentication modules."""

from auth.exceptions import (
    AuthError,
    CredentialsSignin,
    SessionExpiredError,
    UserInactiveError,
)
from auth.types import (
    User,
    Session,
    Credentials,
    AuthenticatedUser,
)
from auth.config import AuthConfig
from auth.database import AuthDatabase
from auth.session import SessionManager
from auth.service import AuthService
from auth.actions import authenticate, AuthResult
from auth.security_middleware import AuthMiddleware
from auth.api import create_auth_router

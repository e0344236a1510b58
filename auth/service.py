"""Authentication service - email/password sign-in and sessions."""

import logging
import secrets

from pydantic import ValidationError

from auth.config import AuthConfig
from auth.database import AuthDatabase
from auth.exceptions import CredentialsSignin, UserInactiveError
from auth.passwords import hash_password, verify_password
from auth.session import SessionManager
from auth.types import AuthenticatedUser, Credentials, Session, User

logger = logging.getLogger(__name__)


class AuthService:
    """Orchestrates credential sign-in, session validation and logout."""

    def __init__(
        self,
        config: AuthConfig,
        auth_db: AuthDatabase,
        session_manager: SessionManager,
    ):
        self._config = config
        self._auth_db = auth_db
        self._session_manager = session_manager
        # Checked against when the email is unknown, so both failures cost one scrypt run
        self._decoy_hash = hash_password(secrets.token_urlsafe(16), n=config.scrypt_n)

    def sign_in(self, email: str | None, password: str | None) -> AuthenticatedUser:
        """Check credentials and open a session.

        Malformed input, unknown email and wrong password are indistinguishable
        to the caller.

        Raises:
            CredentialsSignin: If the credentials do not match an account.
            UserInactiveError: If the account is deactivated.
        """
        try:
            credentials = Credentials(email=email, password=password)
        except ValidationError:
            raise CredentialsSignin("Invalid credentials") from None

        if len(credentials.password) < self._config.password_min_length:
            raise CredentialsSignin("Invalid credentials")

        found = self._auth_db.get_user_with_password(credentials.email)
        if found is None:
            verify_password(credentials.password, self._decoy_hash)
            logger.info("Sign-in failed: unknown email")
            raise CredentialsSignin("Invalid credentials")

        user, password_hash = found
        if not verify_password(credentials.password, password_hash):
            logger.info(f"Sign-in failed: wrong password for user {user.id}")
            raise CredentialsSignin("Invalid credentials")

        if not user.is_active:
            logger.info(f"Sign-in refused: user {user.id} is inactive")
            raise UserInactiveError("User account is deactivated")

        session = self._session_manager.create_session(user.id)
        logger.info(f"User {user.id} signed in")
        return AuthenticatedUser(user=user, session=session)

    def create_user(self, email: str, name: str, password: str) -> User:
        """Register an account with a hashed password.

        Raises:
            ValueError: If the email is malformed or the password is shorter
                than the configured minimum.
        """
        if len(password) < self._config.password_min_length:
            raise ValueError(
                f"Password must be at least {self._config.password_min_length} characters"
            )
        try:
            Credentials(email=email, password=password)
        except ValidationError:
            raise ValueError(f"'{email}' is not a valid email address") from None
        user = self._auth_db.create_user(
            email, name, hash_password(password, n=self._config.scrypt_n)
        )
        logger.info(f"Created user {user.id}")
        return user

    def validate_session(self, token: str) -> Session:
        """Validate session token.

        Raises:
            SessionExpiredError: If session invalid or expired.
        """
        return self._session_manager.validate_session(token)

    def logout(self, session_token: str) -> None:
        """Revoke session. Safe to call with invalid token."""
        self._session_manager.revoke_session(session_token)

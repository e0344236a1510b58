"""Login sessions kept in Valkey.

A session is an opaque random token mapped to the signed-in user. Each
authenticated request pushes its expiry forward by the configured lifetime,
and the Valkey key's TTL follows the expiry so abandoned sessions vanish
on their own.
"""

import secrets
from datetime import datetime, timedelta
from typing import Any, Dict
from uuid import UUID

from auth.config import AuthConfig
from auth.exceptions import SessionExpiredError
from auth.types import Session
from clients.valkey_client import ValkeyClient
from utils.timezone import now_utc, parse_iso

_TIMESTAMPS = ("created_at", "expires_at", "last_activity_at")


def _dump(session: Session) -> Dict[str, Any]:
    data = {name: getattr(session, name).isoformat() for name in _TIMESTAMPS}
    data["user_id"] = str(session.user_id)
    return data


def _load(token: str, data: Dict[str, Any]) -> Session:
    return Session(
        token=token,
        user_id=UUID(data["user_id"]),
        **{name: parse_iso(data[name]) for name in _TIMESTAMPS},
    )


class SessionManager:
    """Creates, validates (sliding expiry) and revokes sessions."""

    KEY_PREFIX = "session:"
    TOKEN_BYTES = 32

    def __init__(self, valkey: ValkeyClient, config: AuthConfig):
        self._valkey = valkey
        self._lifetime = timedelta(hours=config.session_expiry_hours)

    def _key(self, token: str) -> str:
        return f"{self.KEY_PREFIX}{token}"

    def _save(self, session: Session) -> None:
        self._valkey.set_json(
            self._key(session.token),
            _dump(session),
            expire_seconds=int(self._lifetime.total_seconds()),
        )

    def _expires_from(self, moment: datetime) -> datetime:
        return moment + self._lifetime

    def create_session(self, user_id: UUID) -> Session:
        """Open a session for a user who just signed in."""
        now = now_utc()
        session = Session(
            token=secrets.token_urlsafe(self.TOKEN_BYTES),
            user_id=user_id,
            created_at=now,
            expires_at=self._expires_from(now),
            last_activity_at=now,
        )
        self._save(session)
        return session

    def validate_session(self, token: str) -> Session:
        """Return the live session for token, extended from now.

        Raises:
            SessionExpiredError: Token unknown, revoked or past its expiry.
        """
        data = self._valkey.get_json(self._key(token))
        if data is None:
            raise SessionExpiredError("Session not found or expired")

        session = _load(token, data)
        now = now_utc()
        if session.expires_at < now:
            self.revoke_session(token)
            raise SessionExpiredError("Session expired")

        extended = session.model_copy(
            update={"expires_at": self._expires_from(now), "last_activity_at": now}
        )
        self._save(extended)
        return extended

    def revoke_session(self, token: str) -> None:
        """Forget a session. Unknown tokens are ignored."""
        self._valkey.delete(self._key(token))

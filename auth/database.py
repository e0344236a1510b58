"""Database operations for authentication (users table)."""

from typing import Any, Dict
from uuid import UUID

from clients.postgres_client import PostgresClient
from auth.types import User

_USER_COLUMNS = "id, email, name, is_active, created_at"


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        id=UUID(row["id"]) if isinstance(row["id"], str) else row["id"],
        email=row["email"],
        name=row["name"],
        is_active=row["is_active"],
        created_at=row["created_at"],
    )


class AuthDatabase:
    """Database operations for authentication."""

    def __init__(self, postgres: PostgresClient):
        self._db = postgres

    def get_user_with_password(self, email: str) -> tuple[User, str] | None:
        """Find user by email (case-insensitive) along with the stored password hash."""
        row = self._db.execute_single(
            f"SELECT {_USER_COLUMNS}, password_hash FROM users WHERE email = lower(%s)",
            (email,),
        )
        if row is None:
            return None
        return _to_user(row), row["password_hash"]

    def get_user_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID."""
        row = self._db.execute_single(
            f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            (str(user_id),),
        )
        if row is None:
            return None
        return _to_user(row)

    def create_user(self, email: str, name: str, password_hash: str) -> User:
        """Create new user with email (lowercased)."""
        rows = self._db.execute_returning(
            f"""INSERT INTO users (email, name, password_hash)
               VALUES (lower(%s), %s, %s)
               RETURNING {_USER_COLUMNS}""",
            (email, name, password_hash),
        )
        return _to_user(rows[0])

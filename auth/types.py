"""Auth data shapes: accounts, sessions, and the login form payload."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class User(BaseModel):
    """Dashboard account. The password hash never leaves auth.database."""

    id: UUID
    email: EmailStr
    name: str
    is_active: bool = True
    created_at: datetime


class Session(BaseModel):
    """Signed-in browser session, keyed by an opaque cookie token."""

    token: str
    user_id: UUID
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime


class Credentials(BaseModel):
    """Email and password as typed into the login form."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=1024)


class AuthenticatedUser(BaseModel):
    user: User
    session: Session

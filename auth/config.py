"""Authentication configuration."""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    Durations are in hours; scrypt cost parameters follow hashlib.scrypt.
    """

    session_expiry_hours: int = Field(
        default=24 * 30,
        description="Session lifetime in hours, extended on activity",
        ge=1,
        le=2160,
    )
    password_min_length: int = Field(
        default=6,
        description="Shortest password accepted at sign-in",
        ge=1,
        le=128,
    )
    scrypt_n: int = Field(
        default=2 ** 14,
        description="scrypt CPU/memory cost for new password hashes",
        ge=2 ** 10,
    )
    cookie_secure: bool = Field(
        default=True,
        description="Send the session cookie over HTTPS only",
    )

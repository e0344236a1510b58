"""JSON envelope for read routes and infrastructure errors.

Form routes (create, edit, delete) answer with the form state instead:
{errors, message}, or a redirect on success.
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from utils.timezone import now_utc


class ErrorCodes:
    """Machine-readable codes carried in APIError.code."""

    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class APIError(BaseModel):
    code: str
    message: str = Field(..., description="Safe to show to users")


class APIMeta(BaseModel):
    timestamp: datetime
    request_id: str = Field(..., description="Matches the X-Request-ID response header")


class APIResponse(BaseModel):
    success: bool
    data: Any | None = None
    error: APIError | None = None
    meta: APIMeta


def _meta(request_id: str | None) -> APIMeta:
    return APIMeta(timestamp=now_utc(), request_id=request_id or str(uuid4()))


def success_response(data: Any, request_id: str | None = None) -> APIResponse:
    """Wrap a payload. A request ID is generated when none is given."""
    return APIResponse(success=True, data=data, meta=_meta(request_id))


def error_response(code: str, message: str, request_id: str | None = None) -> APIResponse:
    """Wrap an error code and message."""
    return APIResponse(
        success=False,
        error=APIError(code=code, message=message),
        meta=_meta(request_id),
    )

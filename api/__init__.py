"""HTTP layer: invoice pages, receipt uploads, envelopes and error handling."""

from api.base import ErrorCodes, success_response, error_response
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware

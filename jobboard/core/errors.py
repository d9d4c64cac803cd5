"""
Application error taxonomy.

Every error carries an HTTP status and a stable machine-readable code. The
exception handlers registered in jobboard.main turn these into JSON bodies of
the form {"error": <message>, "code": <code>, ...extra}.
"""
from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that are expected and mapped to a response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_message: str = "Something went wrong on our end"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "code": self.code}
        body.update(self.extra)
        return body


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Forbidden"


class SubscriptionRequired(Forbidden):
    code = "subscription_required"
    default_message = "Active subscription required"


class LimitReached(Forbidden):
    code = "limit_reached"
    default_message = "Usage limit reached. Upgrade to premium for unlimited access."


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not Found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "Conflict"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Validation failed"


class ProviderError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "provider_error"
    default_message = "Payment provider request failed"


class SignatureMismatch(ProviderError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "signature_mismatch"
    default_message = "Invalid payment signature"


class RateLimited(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "rate_limited"
    default_message = "Too many requests"


class InternalError(AppError):
    pass

# app/core/errors.py
"""
Typed application failures.

Services raise these; the exception handlers in `app.main` turn them into
the JSON envelope `{success: false, message, error?}`. Each class fixes its
HTTP status so routers never pick status codes for domain failures.
"""
from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for every expected failure."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        error: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(
            status_code=type(self).status_code,
            detail=message or type(self).message,
            headers=headers,
        )
        # Optional extra detail rendered as the envelope's `error` field.
        self.error = error


# ----- 400 -----


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation error"


# ----- 401 -----


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication failed"

    def __init__(self, message: str | None = None, **kwargs: Any):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class MissingCredential(Unauthenticated):
    message = "Access token required"


class InvalidToken(Unauthenticated):
    message = "Invalid token"


class StaleCredential(Unauthenticated):
    message = "Invalid or expired token"


class InvalidCredentials(Unauthenticated):
    """Login failure. Subclasses keep the reason apart for logging only."""

    message = "Invalid email or password"


class LoginUserNotFound(InvalidCredentials):
    pass


class InvalidPassword(InvalidCredentials):
    pass


# ----- 403 -----


class InsufficientRole(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Insufficient role"


class AccessDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


# ----- 404 -----


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class UserNotFound(NotFound):
    message = "User not found"


# ----- 409 -----


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class DuplicateEmail(Conflict):
    message = "User already exists with this email"


class AlreadyInCart(Conflict):
    message = "Course already in cart"


class AlreadyPurchased(Conflict):
    message = "You already bought this course"


# ----- 502 -----


class UpstreamFailure(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Upstream service failure"

"""Error types raised by the use cases and repositories."""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that are reported back to API clients."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    """The request carried invalid or malformed data."""

    default_message = "Invalid request"


class NotFoundError(AppError):
    """The requested user does not exist."""

    default_message = "Resource not found"


class ConflictError(AppError):
    """The request conflicts with existing state, e.g. a duplicate email."""

    default_message = "Resource conflict"


class InternalError(AppError):
    default_message = "Internal Server Error"


class InvalidValueError(ValueError):
    """Raised when a value object or argument fails validation."""


class RepositoryError(RuntimeError):
    """Raised when the backing store rejects an operation."""


class DuplicateEmailError(RepositoryError):
    """Raised when an insert violates the unique email index."""

    def __init__(self, email: str) -> None:
        super().__init__(f"A user with email {email} already exists")
        self.email = email


__all__ = [
    "AppError",
    "BadRequestError",
    "ConflictError",
    "DuplicateEmailError",
    "InternalError",
    "InvalidValueError",
    "NotFoundError",
    "RepositoryError",
]

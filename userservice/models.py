"""Domain models for the user service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .errors import InvalidValueError


@dataclass(frozen=True)
class UserId:
    """Positive integer identifier assigned by storage."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise InvalidValueError("User ID must be positive")


@dataclass(frozen=True)
class Email:
    """Email address; only checks for a non-blank value containing ``@``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise InvalidValueError("Email cannot be blank")
        if "@" not in self.value:
            raise InvalidValueError("Email must contain @ symbol")


@dataclass(frozen=True)
class User:
    """Represents a user record stored in the users table."""

    id: UserId
    email: Email
    name: str
    created_at: datetime
    updated_at: datetime


__all__ = ["Email", "User", "UserId"]

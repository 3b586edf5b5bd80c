"""Request and response models exposed over HTTP."""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from .models import User

SERVICE_VERSION = "0.0.1"

T = TypeVar("T")


def isoformat(value: datetime) -> str:
    """Render ``value`` as an ISO-8601 UTC string with a ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def utc_now() -> str:
    return isoformat(datetime.now(timezone.utc))


class CreateUserRequest(BaseModel):
    email: str
    name: str


class UpdateUserRequest(BaseModel):
    name: str


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    created_at: str
    updated_at: str


class PaginationResponse(BaseModel):
    page: int
    size: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class UsersPageResponse(BaseModel):
    users: List[UserResponse]
    pagination: PaginationResponse


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    timestamp: str


class ErrorResponse(BaseModel):
    message: str


class HealthStatus(BaseModel):
    status: str
    timestamp: str
    database: str
    version: str = SERVICE_VERSION
    error: Optional[str] = None


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id.value,
        email=user.email.value,
        name=user.name,
        created_at=isoformat(user.created_at),
        updated_at=isoformat(user.updated_at),
    )


def users_to_page(users: List[User], page: int, size: int, total: int) -> UsersPageResponse:
    total_pages = 0 if total == 0 else math.ceil(total / size)
    return UsersPageResponse(
        users=[user_to_response(user) for user in users],
        pagination=PaginationResponse(
            page=page,
            size=size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages - 1,
            has_previous=page > 0,
        ),
    )


def empty_page(page: int, size: int) -> UsersPageResponse:
    return UsersPageResponse(
        users=[],
        pagination=PaginationResponse(
            page=page,
            size=size,
            total=0,
            total_pages=0,
            has_next=False,
            has_previous=False,
        ),
    )


def success_response(data: T) -> ApiResponse[T]:
    return ApiResponse(success=True, data=data, timestamp=utc_now())


__all__ = [
    "ApiResponse",
    "CreateUserRequest",
    "ErrorResponse",
    "HealthStatus",
    "PaginationResponse",
    "SERVICE_VERSION",
    "UpdateUserRequest",
    "UserResponse",
    "UsersPageResponse",
    "empty_page",
    "isoformat",
    "success_response",
    "user_to_response",
    "users_to_page",
    "utc_now",
]

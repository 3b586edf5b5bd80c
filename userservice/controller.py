"""Translate HTTP-shaped input into use case calls and response envelopes."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from fastapi import status

from .errors import BadRequestError
from .schemas import (
    ApiResponse,
    CreateUserRequest,
    UpdateUserRequest,
    empty_page,
    success_response,
    user_to_response,
    users_to_page,
)
from .usecases import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersPaginatedUseCase,
    UpdateUserUseCase,
)

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Ids are SQLite INTEGERs; pagination values are 32-bit.
_ID_RANGE = (-(2**63), 2**63 - 1)
_QUERY_INT_RANGE = (-(2**31), 2**31 - 1)

ControllerResult = Tuple[int, Optional[ApiResponse]]


def _parse_bounded(raw: Optional[str], bounds: Tuple[int, int]) -> Optional[int]:
    if raw is None or not _INTEGER_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    low, high = bounds
    if not low <= value <= high:
        return None
    return value


def parse_user_id(raw: Optional[str]) -> int:
    """Parse a path id, rejecting anything that is not a 64-bit integer."""

    user_id = _parse_bounded(raw, _ID_RANGE)
    if user_id is None:
        raise BadRequestError("User ID must be a valid number")
    return user_id


def _parse_int(raw: Optional[str]) -> Optional[int]:
    return _parse_bounded(raw, _QUERY_INT_RANGE)


def resolve_page(raw: Optional[str]) -> int:
    page = _parse_int(raw)
    if page is None or page < 0:
        return 0
    return page


def resolve_size(raw: Optional[str]) -> int:
    size = _parse_int(raw)
    if size is None or not 1 <= size <= MAX_PAGE_SIZE:
        return DEFAULT_PAGE_SIZE
    return size


class UserController:
    """Coordinates the user use cases for the HTTP routes.

    Every handler returns a ``(status_code, body)`` pair; ``body`` is ``None``
    when the response carries no content.
    """

    def __init__(
        self,
        *,
        create_user: CreateUserUseCase,
        get_user: GetUserUseCase,
        update_user: UpdateUserUseCase,
        delete_user: DeleteUserUseCase,
        list_users: ListUsersPaginatedUseCase,
    ) -> None:
        self._create_user = create_user
        self._get_user = get_user
        self._update_user = update_user
        self._delete_user = delete_user
        self._list_users = list_users

    async def create_user(self, payload: CreateUserRequest) -> ControllerResult:
        user = await self._create_user(payload.email, payload.name)
        return status.HTTP_201_CREATED, success_response(user_to_response(user))

    async def get_user(self, raw_id: Optional[str]) -> ControllerResult:
        user = await self._get_user(parse_user_id(raw_id))
        return status.HTTP_200_OK, success_response(user_to_response(user))

    async def update_user(self, raw_id: Optional[str], payload: UpdateUserRequest) -> ControllerResult:
        user_id = parse_user_id(raw_id)
        user = await self._update_user(user_id, payload.name)
        return status.HTTP_200_OK, success_response(user_to_response(user))

    async def delete_user(self, raw_id: Optional[str]) -> ControllerResult:
        await self._delete_user(parse_user_id(raw_id))
        return status.HTTP_204_NO_CONTENT, None

    async def list_users(self, raw_page: Optional[str], raw_size: Optional[str]) -> ControllerResult:
        page = resolve_page(raw_page)
        size = resolve_size(raw_size)

        users, total = await self._list_users(page, size)
        if not users:
            body = empty_page(page, size)
        else:
            body = users_to_page(users, page, size, total)
        return status.HTTP_200_OK, success_response(body)


__all__ = ["UserController", "parse_user_id", "resolve_page", "resolve_size"]

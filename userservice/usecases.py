"""Business operations on users, one class per use case."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Tuple

from .errors import BadRequestError, ConflictError, DuplicateEmailError, InvalidValueError, NotFoundError
from .models import Email, User, UserId
from .repositories import UserRepository

logger = logging.getLogger("userservice.usecases")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _is_blank(value: str) -> bool:
    return not value or not value.strip()


class CreateUserUseCase:
    """Register a new user with a unique email address.

    Checks run in a fixed order: blank name, email format, duplicate email.
    The name is trimmed before it is stored.
    """

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def __call__(self, email: str, name: str) -> User:
        if _is_blank(name):
            raise BadRequestError("Name cannot be blank")

        try:
            email_value = Email(email)
        except InvalidValueError as exc:
            raise BadRequestError(str(exc) or "Invalid email format") from exc

        if await self._repository.find_by_email(email_value) is not None:
            raise ConflictError(f"User with email {email} already exists")

        try:
            user = await self._repository.create(email_value, name.strip())
        except DuplicateEmailError as exc:
            # Lost a race with a concurrent insert of the same email.
            raise ConflictError(f"User with email {email} already exists") from exc

        logger.info("Created user %s", user.id.value)
        return user


class GetUserUseCase:
    """Fetch a single user by id."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def __call__(self, user_id: int) -> User:
        user = await self._repository.find_by_id(UserId(user_id))
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user


class UpdateUserUseCase:
    """Rename an existing user. The id and email never change."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def __call__(self, user_id: int, name: str) -> User:
        if _is_blank(name):
            raise BadRequestError("Name cannot be blank")

        existing = await self._repository.find_by_id(UserId(user_id))
        if existing is None:
            raise NotFoundError(f"User with ID {user_id} not found")

        updated = await self._repository.update(replace(existing, name=name.strip()))
        logger.info("Updated user %s", user_id)
        return updated


class DeleteUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def __call__(self, user_id: int) -> bool:
        identifier = UserId(user_id)
        if await self._repository.find_by_id(identifier) is None:
            raise NotFoundError(f"User with ID {user_id} not found")

        deleted = await self._repository.delete_by_id(identifier)
        logger.info("Deleted user %s (removed=%s)", user_id, deleted)
        return deleted


class ListUsersPaginatedUseCase:
    """Return one page of users, ordered by id, with the overall user count."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    async def __call__(self, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Tuple[List[User], int]:
        if page < 0:
            raise InvalidValueError("Page must be non-negative")
        if size <= 0:
            raise InvalidValueError("Size must be positive")
        if size > MAX_PAGE_SIZE:
            raise InvalidValueError(f"Size cannot exceed {MAX_PAGE_SIZE}")

        users = await self._repository.find_all(page * size, size)
        total = await self._repository.get_total_count()
        return users, total


__all__ = [
    "CreateUserUseCase",
    "DEFAULT_PAGE_SIZE",
    "DeleteUserUseCase",
    "GetUserUseCase",
    "ListUsersPaginatedUseCase",
    "MAX_PAGE_SIZE",
    "UpdateUserUseCase",
]

"""Repository contract for users and its SQLite implementation."""

from __future__ import annotations

import abc
from dataclasses import replace
from typing import List, Optional

import anyio

from .database import Database
from .models import Email, User, UserId


class UserRepository(abc.ABC):
    """Persistence boundary for :class:`~userservice.models.User` entities."""

    @abc.abstractmethod
    async def create(self, email: Email, name: str) -> User:
        """Insert a new user; storage assigns the id and both timestamps.

        Raises:
            DuplicateEmailError: if the email is already taken.
        """

    @abc.abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Return the user with ``user_id`` or ``None``."""

    @abc.abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """Return the user registered with ``email`` or ``None``."""

    @abc.abstractmethod
    async def update(self, user: User) -> User:
        """Persist ``email`` and ``name`` of ``user`` and refresh ``updated_at``."""

    @abc.abstractmethod
    async def delete_by_id(self, user_id: UserId) -> bool:
        """Delete a user, returning whether a row was removed."""

    @abc.abstractmethod
    async def find_all(self, offset: int, limit: int) -> List[User]:
        """Return up to ``limit`` users ordered by id, skipping ``offset``."""

    @abc.abstractmethod
    async def get_total_count(self) -> int:
        """Return the number of stored users."""


class SQLiteUserRepository(UserRepository):
    """Run :class:`Database` calls on a worker thread for each operation."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def create(self, email: Email, name: str) -> User:
        return await anyio.to_thread.run_sync(self._database.create_user, email.value, name)

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return await anyio.to_thread.run_sync(self._database.get_user, user_id.value)

    async def find_by_email(self, email: Email) -> Optional[User]:
        return await anyio.to_thread.run_sync(self._database.get_user_by_email, email.value)

    async def update(self, user: User) -> User:
        def _update() -> User:
            updated_at = self._database.update_user(
                user.id.value,
                email=user.email.value,
                name=user.name,
                previous=user.updated_at,
            )
            return replace(user, updated_at=updated_at)

        return await anyio.to_thread.run_sync(_update)

    async def delete_by_id(self, user_id: UserId) -> bool:
        return await anyio.to_thread.run_sync(self._database.delete_user, user_id.value)

    async def find_all(self, offset: int, limit: int) -> List[User]:
        def _list() -> List[User]:
            return self._database.list_users(offset=offset, limit=limit)

        return await anyio.to_thread.run_sync(_list)

    async def get_total_count(self) -> int:
        return await anyio.to_thread.run_sync(self._database.count_users)


__all__ = ["SQLiteUserRepository", "UserRepository"]

"""In-memory user repository for tests and embedded use."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from .errors import DuplicateEmailError
from .models import Email, User, UserId
from .repositories import UserRepository


class InMemoryUserRepository(UserRepository):
    """Dictionary-backed repository mirroring the SQLite semantics."""

    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    async def create(self, email: Email, name: str) -> User:
        now = self._now()
        with self._lock:
            if any(user.email == email for user in self._users.values()):
                raise DuplicateEmailError(email.value)
            user = User(
                id=UserId(self._next_id),
                email=email,
                name=name,
                created_at=now,
                updated_at=now,
            )
            self._users[self._next_id] = user
            self._next_id += 1
        return user

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id.value)

    async def find_by_email(self, email: Email) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user
        return None

    async def update(self, user: User) -> User:
        with self._lock:
            for other in self._users.values():
                if other.email == user.email and other.id != user.id:
                    raise DuplicateEmailError(user.email.value)
            updated_at = max(self._now(), user.updated_at + timedelta(microseconds=1))
            updated = replace(user, updated_at=updated_at)
            if user.id.value in self._users:
                self._users[user.id.value] = updated
        return updated

    async def delete_by_id(self, user_id: UserId) -> bool:
        with self._lock:
            return self._users.pop(user_id.value, None) is not None

    async def find_all(self, offset: int, limit: int) -> List[User]:
        with self._lock:
            ordered = [self._users[key] for key in sorted(self._users)]
        return ordered[offset : offset + limit]

    async def get_total_count(self) -> int:
        with self._lock:
            return len(self._users)

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["InMemoryUserRepository"]

"""SQLite-backed persistence for user records."""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from .errors import DuplicateEmailError
from .models import Email, User, UserId


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the application database."""

    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "users.sqlite3").resolve(strict=False)


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


class Database:
    """Thin wrapper around SQLite for persisting users.

    Every method opens its own connection and runs a single transaction, so
    instances can be shared freely between worker threads.
    """

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create the users table and its indexes if they do not already exist."""

        with self._transaction() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL,
                    name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users(email);
                """
            )

    def ping(self) -> None:
        """Run a trivial query, raising if the database cannot be reached."""

        with self._transaction() as conn:
            conn.execute("SELECT 1").fetchone()

    # ------------------------------------------------------------------
    # User management
    # ------------------------------------------------------------------
    def create_user(self, email: str, name: str) -> User:
        created_at = _current_timestamp()
        serialized = _serialize_datetime(created_at)

        with self._transaction() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO users (email, name, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (email, name, serialized, serialized),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateEmailError(email) from exc
            user_id = int(cursor.lastrowid)

        return User(
            id=UserId(user_id),
            email=Email(email),
            name=name,
            created_at=created_at,
            updated_at=created_at,
        )

    def get_user(self, user_id: int) -> Optional[User]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._transaction() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def update_user(self, user_id: int, *, email: str, name: str, previous: datetime) -> datetime:
        """Rewrite the mutable columns of a user and return the new ``updated_at``.

        The returned timestamp is always later than ``previous``.
        """

        updated_at = max(_current_timestamp(), previous + timedelta(microseconds=1))

        with self._transaction() as conn:
            try:
                conn.execute(
                    "UPDATE users SET email = ?, name = ?, updated_at = ? WHERE id = ?",
                    (email, name, _serialize_datetime(updated_at), user_id),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateEmailError(email) from exc

        return updated_at

    def delete_user(self, user_id: int) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cursor.rowcount > 0

    def list_users(self, *, offset: int, limit: int) -> List[User]:
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM users ORDER BY id ASC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [self._row_to_user(row) for row in rows]

    def count_users(self) -> int:
        with self._transaction() as conn:
            row = conn.execute("SELECT COUNT(*) AS total FROM users").fetchone()
        return int(row["total"])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=UserId(int(row["id"])),
            email=Email(str(row["email"])),
            name=str(row["name"]),
            created_at=_parse_datetime(str(row["created_at"])),
            updated_at=_parse_datetime(str(row["updated_at"])),
        )


__all__ = ["Database", "resolve_database_path"]

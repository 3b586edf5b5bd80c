from __future__ import annotations

import sqlite3
import sys
from dataclasses import replace
from pathlib import Path

import anyio
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userservice.database import Database, resolve_database_path
from userservice.errors import DuplicateEmailError
from userservice.models import Email, UserId
from userservice.repositories import SQLiteUserRepository


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db = Database(tmp_path / "nested" / "users.sqlite3")
    db.initialize()
    return db


@pytest.fixture()
def repository(database: Database) -> SQLiteUserRepository:
    return SQLiteUserRepository(database)


def test_initialize_creates_parent_directory_and_is_idempotent(database: Database) -> None:
    assert database.path.parent.is_dir()
    database.initialize()

    with sqlite3.connect(database.path) as conn:
        indexes = {row[1] for row in conn.execute("PRAGMA index_list(users)").fetchall()}
    assert "idx_users_email" in indexes


def test_resolve_database_path_prefers_explicit_value(tmp_path: Path) -> None:
    explicit = tmp_path / "custom.sqlite3"
    assert resolve_database_path(str(explicit)) == explicit.resolve()
    assert resolve_database_path(None).name == "users.sqlite3"


def test_create_persists_and_returns_user(repository: SQLiteUserRepository) -> None:
    user = anyio.run(repository.create, Email("test@example.com"), "Test User")

    assert user.id.value > 0
    assert user.email == Email("test@example.com")
    assert user.name == "Test User"
    assert user.created_at == user.updated_at
    assert user.created_at.tzinfo is not None


def test_find_by_id_and_email(repository: SQLiteUserRepository) -> None:
    created = anyio.run(repository.create, Email("find@example.com"), "Finder")

    assert anyio.run(repository.find_by_id, created.id) == created
    assert anyio.run(repository.find_by_email, Email("find@example.com")) == created
    assert anyio.run(repository.find_by_id, UserId(999)) is None
    assert anyio.run(repository.find_by_email, Email("missing@example.com")) is None


def test_create_rejects_duplicate_email(repository: SQLiteUserRepository) -> None:
    anyio.run(repository.create, Email("dup@example.com"), "First")

    with pytest.raises(DuplicateEmailError):
        anyio.run(repository.create, Email("dup@example.com"), "Second")
    assert anyio.run(repository.get_total_count) == 1


def test_update_rewrites_name_and_refreshes_timestamp(repository: SQLiteUserRepository) -> None:
    created = anyio.run(repository.create, Email("update@example.com"), "Old Name")

    updated = anyio.run(repository.update, replace(created, name="New Name"))

    assert updated.name == "New Name"
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at
    assert anyio.run(repository.find_by_id, created.id) == updated


def test_delete_by_id(repository: SQLiteUserRepository) -> None:
    created = anyio.run(repository.create, Email("delete@example.com"), "Delete Me")

    assert anyio.run(repository.delete_by_id, created.id) is True
    assert anyio.run(repository.find_by_id, created.id) is None
    assert anyio.run(repository.delete_by_id, created.id) is False
    assert anyio.run(repository.delete_by_id, UserId(999)) is False


def test_find_all_pages_in_id_order(repository: SQLiteUserRepository) -> None:
    for index in range(5):
        anyio.run(repository.create, Email(f"user{index}@example.com"), f"User {index}")

    first_page = anyio.run(repository.find_all, 0, 3)
    second_page = anyio.run(repository.find_all, 3, 3)

    assert len(first_page) == 3
    assert len(second_page) == 2
    ids = [user.id.value for user in first_page + second_page]
    assert ids == sorted(ids)
    assert [user.name for user in first_page] == ["User 0", "User 1", "User 2"]
    assert anyio.run(repository.find_all, 10, 3) == []
    assert anyio.run(repository.get_total_count) == 5


def test_ping_fails_when_database_path_is_unusable(tmp_path: Path) -> None:
    database = Database(tmp_path / "users.sqlite3")
    database.path.mkdir()

    with pytest.raises(sqlite3.Error):
        database.ping()

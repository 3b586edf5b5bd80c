from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userservice.errors import InvalidValueError
from userservice.models import Email, User, UserId


@pytest.mark.parametrize("value", [0, -1, -500])
def test_user_id_rejects_non_positive_values(value: int) -> None:
    with pytest.raises(InvalidValueError, match="User ID must be positive"):
        UserId(value)


def test_user_id_compares_by_value() -> None:
    assert UserId(7) == UserId(7)
    assert UserId(7) != UserId(8)


@pytest.mark.parametrize("value", ["", "   ", "\t\n"])
def test_email_rejects_blank_values(value: str) -> None:
    with pytest.raises(InvalidValueError, match="Email cannot be blank"):
        Email(value)


@pytest.mark.parametrize("value", ["john.example.com", "plainaddress", "john at example"])
def test_email_requires_at_symbol(value: str) -> None:
    with pytest.raises(InvalidValueError, match="Email must contain @ symbol"):
        Email(value)


@pytest.mark.parametrize("value", ["a@b", "@", "john@example.com", "weird@@value"])
def test_email_only_checks_for_at_symbol(value: str) -> None:
    assert Email(value).value == value


def test_user_is_immutable() -> None:
    now = datetime.now(timezone.utc)
    user = User(id=UserId(1), email=Email("a@b.com"), name="A", created_at=now, updated_at=now)

    with pytest.raises(AttributeError):
        user.name = "B"  # type: ignore[misc]

from __future__ import annotations

import sys
from pathlib import Path

import anyio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userservice.database import Database
from userservice.health import DatabaseHealthService


class BrokenDatabase(Database):
    def ping(self) -> None:
        raise RuntimeError("connection refused")


def test_health_reports_reachable_database(tmp_path: Path) -> None:
    database = Database(tmp_path / "users.sqlite3")
    database.initialize()

    assert anyio.run(DatabaseHealthService(database).check_health) is True


def test_health_swallows_database_errors(tmp_path: Path, caplog) -> None:
    service = DatabaseHealthService(BrokenDatabase(tmp_path / "users.sqlite3"))

    with caplog.at_level("WARNING", logger="userservice.health"):
        assert anyio.run(service.check_health) is False

    assert "connection refused" in caplog.text

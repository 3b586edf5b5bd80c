from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userservice.config import DEFAULT_HOST, DEFAULT_PORT, ServerConfig, load_config, resolve_config_path


def _write_config(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_apply_without_environment_or_file(tmp_path: Path) -> None:
    config = load_config({}, config_path=tmp_path / "missing.yaml")

    assert config.server.host == DEFAULT_HOST
    assert config.server.port == DEFAULT_PORT
    assert config.database.path.name == "users.sqlite3"


def test_file_values_are_used_when_environment_is_silent(tmp_path: Path) -> None:
    db_path = tmp_path / "from-file.sqlite3"
    config_path = _write_config(
        tmp_path / "userservice.yaml",
        f"server:\n  host: 127.0.0.1\n  port: 9000\ndatabase:\n  path: {db_path}\n",
    )

    config = load_config({}, config_path=config_path)

    assert config.server.host == "127.0.0.1"
    assert config.server.port == 9000
    assert config.database.path == db_path.resolve()


def test_environment_overrides_file(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "userservice.yaml", "server:\n  host: 127.0.0.1\n  port: 9000\n")
    env_db = tmp_path / "env.sqlite3"

    config = load_config(
        {
            "USERSERVICE_HOST": "10.0.0.5",
            "USERSERVICE_PORT": "8181",
            "USERSERVICE_DB_PATH": str(env_db),
        },
        config_path=config_path,
    )

    assert config.server.host == "10.0.0.5"
    assert config.server.port == 8181
    assert config.database.path == env_db.resolve()


def test_config_path_can_come_from_environment(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "custom.yaml", "server:\n  port: 7000\n")

    config = load_config({"USERSERVICE_CONFIG": str(config_path)})

    assert config.server.port == 7000
    assert resolve_config_path(None).name == "userservice.yaml"


def test_invalid_port_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="integer"):
        load_config({"USERSERVICE_PORT": "eighty"}, config_path=tmp_path / "missing.yaml")

    with pytest.raises(ValueError, match="between 1 and 65535"):
        ServerConfig(port=70000)


def test_non_mapping_file_is_rejected(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "userservice.yaml", "- just\n- a list\n")

    with pytest.raises(ValueError, match="mapping"):
        load_config({}, config_path=config_path)

"""Configuration management for the user service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .database import resolve_database_path

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


@dataclass(frozen=True)
class ServerConfig:
    """Bind address for the HTTP server."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ValueError("Server host must not be blank")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Server port must be between 1 and 65535, got {self.port}")


@dataclass(frozen=True)
class DatabaseConfig:
    path: Path


@dataclass(frozen=True)
class AppConfig:
    server: ServerConfig
    database: DatabaseConfig


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the YAML configuration file."""
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    return (Path(__file__).resolve().parent.parent / "config" / "userservice.yaml").resolve(strict=False)


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """Load raw settings from ``config_path``; a missing file yields no settings."""
    if not config_path.is_file():
        return {}
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping")
    return raw


def _lookup(raw: Mapping[str, Any], dotted: str) -> Optional[Any]:
    node: Any = raw
    for part in dotted.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def _setting(environ: Mapping[str, str], raw: Mapping[str, Any], env_key: str, path: str) -> Optional[Any]:
    value = environ.get(env_key)
    if value is not None and value.strip():
        return value.strip()
    return _lookup(raw, path)


def _parse_port(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Server port must be an integer, got {value!r}") from exc


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    *,
    config_path: Optional[Path] = None,
) -> AppConfig:
    """Build the service configuration.

    Environment variables win over the YAML file, which wins over defaults.
    """
    if environ is None:
        environ = os.environ
    if config_path is None:
        config_path = resolve_config_path(environ.get("USERSERVICE_CONFIG"))
    raw = load_config_file(config_path)

    host = _setting(environ, raw, "USERSERVICE_HOST", "server.host")
    port = _setting(environ, raw, "USERSERVICE_PORT", "server.port")
    db_path = _setting(environ, raw, "USERSERVICE_DB_PATH", "database.path")

    return AppConfig(
        server=ServerConfig(
            host=str(host) if host is not None else DEFAULT_HOST,
            port=_parse_port(port) if port is not None else DEFAULT_PORT,
        ),
        database=DatabaseConfig(path=resolve_database_path(str(db_path) if db_path else None)),
    )


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ServerConfig",
    "load_config",
    "load_config_file",
    "resolve_config_path",
]

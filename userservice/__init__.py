"""Clean-architecture CRUD service for user records."""

from __future__ import annotations

from typing import Any

from .database import Database, resolve_database_path


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the fully wired application."""

    from .application import create_application

    return create_application(*args, **kwargs)


__all__ = [
    "Database",
    "resolve_database_path",
    "create_app",
]

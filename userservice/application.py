"""Application factory wiring storage, use cases and HTTP routes together."""
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .api import create_app
from .config import AppConfig, load_config
from .controller import UserController
from .database import Database
from .health import DatabaseHealthService, HealthService
from .repositories import SQLiteUserRepository, UserRepository
from .usecases import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersPaginatedUseCase,
    UpdateUserUseCase,
)


def build_controller(repository: UserRepository) -> UserController:
    return UserController(
        create_user=CreateUserUseCase(repository),
        get_user=GetUserUseCase(repository),
        update_user=UpdateUserUseCase(repository),
        delete_user=DeleteUserUseCase(repository),
        list_users=ListUsersPaginatedUseCase(repository),
    )


def create_application(
    *,
    config: Optional[AppConfig] = None,
    database: Optional[Database] = None,
    repository: Optional[UserRepository] = None,
    health_service: Optional[HealthService] = None,
) -> FastAPI:
    """Create the ASGI application.

    The database schema is created on start-up when it does not exist yet.
    """

    if database is None:
        if config is None:
            config = load_config()
        database = Database(config.database.path)
    database.initialize()

    if repository is None:
        repository = SQLiteUserRepository(database)
    if health_service is None:
        health_service = DatabaseHealthService(database)

    app = create_app(controller=build_controller(repository), health_service=health_service)
    app.state.database = database
    return app


__all__ = ["build_controller", "create_application"]

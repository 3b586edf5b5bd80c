"""FastAPI application exposing the user management endpoints."""
from __future__ import annotations

import logging
from typing import Dict, Optional, Type

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .controller import ControllerResult, UserController
from .errors import AppError, BadRequestError, ConflictError, InternalError, InvalidValueError, NotFoundError
from .health import HealthService
from .schemas import (
    SERVICE_VERSION,
    CreateUserRequest,
    ErrorResponse,
    HealthStatus,
    UpdateUserRequest,
    utc_now,
)

logger = logging.getLogger("userservice.api")

ERROR_STATUS_CODES: Dict[Type[AppError], int] = {
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for_error(exc: AppError) -> int:
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    for error in errors:
        if error.get("type") == "json_invalid":
            detail = (error.get("ctx") or {}).get("error") or error.get("msg")
            return f"Invalid JSON format: {detail}" if detail else "Invalid JSON format"
    fields = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        if location:
            fields.append(".".join(location))
    if fields:
        return f"Invalid request format: {', '.join(fields)}"
    return "Invalid request format"


def _render(result: ControllerResult) -> Response:
    status_code, body = result
    if body is None:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def create_app(
    *,
    controller: UserController,
    health_service: HealthService,
) -> FastAPI:
    app = FastAPI(
        title="User Service",
        description="CRUD API for managing user records",
        version=SERVICE_VERSION,
    )
    app.state.controller = controller
    app.state.health_service = health_service

    def get_controller() -> UserController:
        return controller

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Hello World!"

    @app.get("/health", response_model=HealthStatus)
    async def healthcheck() -> JSONResponse:
        healthy = await health_service.check_health()
        payload = HealthStatus(
            status="healthy" if healthy else "unhealthy",
            timestamp=utc_now(),
            database="connected" if healthy else "disconnected",
            error=None if healthy else "Database connection failed",
        )
        code = status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(status_code=code, content=payload.model_dump(exclude_none=True))

    users_router = APIRouter(prefix="/api/v1/users")

    @users_router.get("")
    async def list_users(
        page: Optional[str] = None,
        size: Optional[str] = None,
        users: UserController = Depends(get_controller),
    ) -> Response:
        return _render(await users.list_users(page, size))

    @users_router.post("", status_code=status.HTTP_201_CREATED)
    async def create_user(
        payload: CreateUserRequest,
        users: UserController = Depends(get_controller),
    ) -> Response:
        return _render(await users.create_user(payload))

    @users_router.get("/{user_id}")
    async def read_user(user_id: str, users: UserController = Depends(get_controller)) -> Response:
        return _render(await users.get_user(user_id))

    @users_router.put("/{user_id}")
    async def update_user(
        user_id: str,
        payload: UpdateUserRequest,
        users: UserController = Depends(get_controller),
    ) -> Response:
        return _render(await users.update_user(user_id, payload))

    @users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_user(user_id: str, users: UserController = Depends(get_controller)) -> Response:
        return _render(await users.delete_user(user_id))

    app.include_router(users_router)

    @app.exception_handler(AppError)
    async def handle_app_error(_: Request, exc: AppError) -> JSONResponse:
        return error_response(status_for_error(exc), exc.message)

    @app.exception_handler(InvalidValueError)
    async def handle_invalid_value(_: Request, exc: InvalidValueError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc) or "Invalid request data")

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error while processing %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message)

    return app


__all__ = ["ERROR_STATUS_CODES", "create_app", "error_response", "status_for_error"]

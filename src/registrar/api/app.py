"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import replace
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from registrar.api.dependencies import close_registrar, init_registrar
from registrar.api.models import APIResponse
from registrar.api.routes import courses, enrollments, students
from registrar.config import Settings
from registrar.exceptions import (
    CapacityExceededError,
    DuplicateError,
    NotFoundError,
    RegistrarError,
    StorageError,
    ValidationError,
)
from registrar.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger("api")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    init_registrar(settings)
    logger.info("API started (db=%s)", settings.db_path)
    yield
    close_registrar()


def register_exception_handlers(app: FastAPI) -> None:
    """Map the Registrar error taxonomy onto HTTP responses."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(DuplicateError)
    async def duplicate_handler(_request: Request, exc: DuplicateError) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(CapacityExceededError)
    async def capacity_handler(_request: Request, exc: CapacityExceededError) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(ValidationError)
    async def validation_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(StorageError)
    async def storage_error_handler(_request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage error: %s", exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage error")

    @app.exception_handler(RegistrarError)
    async def registrar_error_handler(_request: Request, exc: RegistrarError) -> JSONResponse:
        logger.error("Unhandled registrar error: %s", exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Settings | None = None, db_path: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted.
        db_path: Overrides settings.db_path.
    """
    if settings is None:
        settings = Settings.from_env()
    if db_path is not None:
        settings = replace(settings, db_path=db_path)

    app = FastAPI(
        title="Registrar API",
        description="REST API for course, student and enrollment bookkeeping",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(students.router, prefix="/api/v1")
    app.include_router(enrollments.router, prefix="/api/v1")

    return app

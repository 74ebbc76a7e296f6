"""Fixtures for route tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from registrar.api.app import register_exception_handlers
from registrar.api.dependencies import get_registrar
from registrar.api.routes import courses, enrollments, students
from registrar.registrar import Registrar


@pytest.fixture
def app(registrar: Registrar):
    """Create a test FastAPI app bound to the in-memory Registrar."""
    app = FastAPI()

    # Override registrar dependency
    def override_get_registrar():
        yield registrar

    app.dependency_overrides[get_registrar] = override_get_registrar

    register_exception_handlers(app)

    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(students.router, prefix="/api/v1")
    app.include_router(enrollments.router, prefix="/api/v1")

    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client

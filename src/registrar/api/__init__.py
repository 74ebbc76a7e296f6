"""REST API for Registrar."""

from registrar.api.app import create_app
from registrar.api.models import (
    APIResponse,
    CourseCreate,
    CourseResponse,
    StudentCreate,
    StudentResponse,
)

__all__ = [
    "APIResponse",
    "CourseCreate",
    "CourseResponse",
    "StudentCreate",
    "StudentResponse",
    "create_app",
]

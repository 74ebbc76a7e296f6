"""State Store - Persistent storage for courses, students and enrollments."""

from registrar.state_store.database import Database
from registrar.state_store.models import (
    CourseRecord,
    EnrollmentRecord,
    StudentRecord,
)
from registrar.state_store.store import StateStore

__all__ = [
    "CourseRecord",
    "Database",
    "EnrollmentRecord",
    "StateStore",
    "StudentRecord",
]

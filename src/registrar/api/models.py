"""Pydantic models for REST API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Course models


class CourseCreate(BaseModel):
    """Request model for creating a course.

    max_capacity falls back to the configured default when omitted.
    """

    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=255)
    max_capacity: int | None = Field(default=None, ge=1, le=100)


class CourseUpdate(BaseModel):
    """Request model for renaming and/or resizing a course."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    max_capacity: int | None = Field(default=None, ge=1, le=100)


class CourseResponse(BaseModel):
    """Response model for a course."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str
    max_capacity: int
    current_enrollment: int
    remaining_capacity: int
    state: str


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course to CourseResponse."""
    return CourseResponse.model_validate(course)


class CatalogStatsResponse(BaseModel):
    """Response model for catalog-wide enrollment totals."""

    active_courses: int
    total_enrolled: int


# Student models


class StudentCreate(BaseModel):
    """Request model for creating a student."""

    student_id: str = Field(..., min_length=1, max_length=36)
    name: str = Field(..., min_length=1, max_length=255)


class StudentUpdate(BaseModel):
    """Request model for renaming a student."""

    name: str = Field(..., min_length=1, max_length=255)


class StudentResponse(BaseModel):
    """Response model for a student."""

    model_config = ConfigDict(from_attributes=True)

    student_id: str
    name: str
    state: str
    enrollments: dict[str, float | None]


def student_to_response(student: Any) -> StudentResponse:
    """Convert a Student to StudentResponse."""
    return StudentResponse.model_validate(student)


# Enrollment models


class EnrollmentCreate(BaseModel):
    """Request model for enrolling a student in a course."""

    course_code: str = Field(..., min_length=1, max_length=20)


class GradeUpdate(BaseModel):
    """Request model for assigning a grade.

    Range is checked by the coordinator so that out-of-range values get the
    same message as any other caller.
    """

    grade: float


class EnrollmentResponse(BaseModel):
    """Response model for one enrollment of a student."""

    model_config = ConfigDict(from_attributes=True)

    course_code: str
    course_name: str
    grade: float | None
    course_active: bool


def enrollment_to_response(view: Any) -> EnrollmentResponse:
    """Convert an EnrollmentView to EnrollmentResponse."""
    return EnrollmentResponse.model_validate(view)


class OutcomeResponse(BaseModel):
    """Response model for enroll and grade outcomes."""

    model_config = ConfigDict(from_attributes=True)

    outcome: str
    student_id: str
    course_code: str
    message: str


def outcome_to_response(result: Any) -> OutcomeResponse:
    """Convert an EnrollmentResult or GradeResult to OutcomeResponse."""
    return OutcomeResponse.model_validate(result)


class OverallGradeResponse(BaseModel):
    """Response model for a student's overall grade."""

    student_id: str
    overall_grade: float

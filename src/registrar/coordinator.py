"""Enrollment Coordinator - cross-entity enrollment and grade operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from registrar.exceptions import (
    AlreadyEnrolledError,
    CapacityExceededError,
    NotEnrolledError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from registrar.models import validate_grade

if TYPE_CHECKING:
    from registrar.catalog import CourseCatalog
    from registrar.models import Student
    from registrar.roster import StudentRoster
    from registrar.state_store import StateStore

logger = logging.getLogger(__name__)


class EnrollmentOutcome(StrEnum):
    """Result of an enroll request."""

    ENROLLED = "enrolled"
    ALREADY_ENROLLED = "already_enrolled"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"


class GradeOutcome(StrEnum):
    """Result of a grade assignment."""

    ASSIGNED = "assigned"
    NOT_ENROLLED = "not_enrolled"
    NOT_FOUND = "not_found"
    INVALID_GRADE = "invalid_grade"
    STORAGE_ERROR = "storage_error"


@dataclass
class EnrollmentResult:
    """Outcome of enroll() with a message suitable for the user."""

    outcome: EnrollmentOutcome
    student_id: str
    course_code: str
    message: str

    @property
    def ok(self) -> bool:
        return self.outcome is EnrollmentOutcome.ENROLLED


@dataclass
class GradeResult:
    """Outcome of assign_grade() with a message suitable for the user."""

    outcome: GradeOutcome
    student_id: str
    course_code: str
    message: str
    grade: float | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is GradeOutcome.ASSIGNED


@dataclass
class EnrollmentView:
    """One row of a student's enrollment listing.

    Attributes:
        course_code: Course code as stored.
        course_name: Course name.
        grade: Assigned grade, or None if not graded yet.
        course_active: False when the course has since been soft-deleted.
    """

    course_code: str
    course_name: str
    grade: float | None
    course_active: bool = True


def overall_grade(student: Student) -> float:
    """Unweighted mean of a student's assigned grades.

    Ungraded enrollments are left out of both the sum and the count.
    Returns 0.0 when nothing has been graded.
    """
    grades = [grade for grade in student.enrollments.values() if grade is not None]
    if not grades:
        return 0.0
    return sum(grades) / len(grades)


class EnrollmentCoordinator:
    """Keeps course counters and student enrollment maps consistent.

    Reads the catalog and roster but owns neither. Storage is always written
    first, through a single atomic store call; the cached entities are
    updated only after that call returns.
    """

    def __init__(
        self,
        store: StateStore,
        catalog: CourseCatalog,
        roster: StudentRoster,
    ) -> None:
        """Initialize the coordinator.

        Args:
            store: Persistence gateway.
            catalog: Course catalog holding active courses.
            roster: Student roster holding active students.
        """
        self.store = store
        self.catalog = catalog
        self.roster = roster

    def enroll(self, student_id: str, course_code: str) -> EnrollmentResult:
        """Enroll a student in a course if it has a free seat.

        Args:
            student_id: The student's ID (case-insensitive).
            course_code: The course code (case-insensitive).

        Returns:
            EnrollmentResult; nothing is changed unless the outcome is ENROLLED.
        """

        def result(outcome: EnrollmentOutcome, message: str) -> EnrollmentResult:
            return EnrollmentResult(outcome, student_id, course_code, message)

        student = self.roster.find(student_id)
        if student is None:
            return result(EnrollmentOutcome.NOT_FOUND, f"Student '{student_id}' not found")
        course = self.catalog.find(course_code)
        if course is None:
            return result(EnrollmentOutcome.NOT_FOUND, f"Course '{course_code}' not found")

        if student.is_enrolled(course.code):
            return result(
                EnrollmentOutcome.ALREADY_ENROLLED,
                f"{student.name} is already enrolled in {course.name}",
            )

        # The store is the capacity authority; the guard runs inside its transaction
        try:
            self.store.enroll_atomic(student.student_id, course.code)
        except CapacityExceededError:
            return result(
                EnrollmentOutcome.CAPACITY_EXCEEDED,
                f"{course.name} is full ({course.max_capacity} students)",
            )
        except AlreadyEnrolledError:
            return result(
                EnrollmentOutcome.ALREADY_ENROLLED,
                f"{student.name} is already enrolled in {course.name}",
            )
        except NotFoundError as e:
            return result(EnrollmentOutcome.NOT_FOUND, str(e))
        except StorageError as e:
            logger.error("Enrollment of %s in %s failed: %s", student.student_id, course.code, e)
            return result(EnrollmentOutcome.STORAGE_ERROR, f"Could not save enrollment: {e}")

        self.catalog.record_enrollment(course)
        self.roster.record_enrollment(student, course.code)
        logger.info(
            "Enrolled %s in %s (%d/%d)",
            student.student_id,
            course.code,
            course.current_enrollment,
            course.max_capacity,
        )
        return result(EnrollmentOutcome.ENROLLED, f"{student.name} enrolled in {course.name}")

    def assign_grade(self, student_id: str, course_code: str, grade: float) -> GradeResult:
        """Record a grade for an existing enrollment.

        Args:
            student_id: The student's ID (case-insensitive).
            course_code: The course code (case-insensitive).
            grade: Grade between 0.0 and 100.0 inclusive.

        Returns:
            GradeResult; the cached grade changes only when the outcome is ASSIGNED.
        """

        def result(outcome: GradeOutcome, message: str, value: float | None = None) -> GradeResult:
            return GradeResult(outcome, student_id, course_code, message, value)

        student = self.roster.find(student_id)
        if student is None:
            return result(GradeOutcome.NOT_FOUND, f"Student '{student_id}' not found")
        course = self.catalog.find(course_code)
        if course is None:
            return result(GradeOutcome.NOT_FOUND, f"Course '{course_code}' not found")

        if not student.is_enrolled(course.code):
            return result(
                GradeOutcome.NOT_ENROLLED,
                f"{student.name} is not enrolled in {course.name}",
            )

        try:
            value = validate_grade(grade)
        except ValidationError as e:
            return result(GradeOutcome.INVALID_GRADE, str(e))

        try:
            self.store.set_grade(student.student_id, course.code, value)
        except NotEnrolledError:
            return result(
                GradeOutcome.NOT_ENROLLED,
                f"{student.name} is not enrolled in {course.name}",
            )
        except ValidationError as e:
            return result(GradeOutcome.INVALID_GRADE, str(e))
        except StorageError as e:
            logger.error("Grading %s in %s failed: %s", student.student_id, course.code, e)
            return result(GradeOutcome.STORAGE_ERROR, f"Could not save grade: {e}")

        self.roster.record_grade(student, course.code, value)
        logger.info("Assigned grade %.2f to %s for %s", value, student.student_id, course.code)
        return result(
            GradeOutcome.ASSIGNED,
            f"Assigned grade {value:g} to {student.name} for {course.name}",
            value,
        )

    def overall_grade(self, student: Student) -> float:
        """Unweighted mean of the student's assigned grades (0.0 if none)."""
        return overall_grade(student)

    def student_overall_grade(self, student_id: str) -> float:
        """Overall grade of an active student.

        Raises:
            StudentNotFoundError: If no active student has this ID.
        """
        return overall_grade(self.roster.get(student_id))

    def list_enrollments(self, student_id: str) -> list[EnrollmentView]:
        """A student's enrollments with course names and grades, ordered by code.

        Courses that have been soft-deleted since enrollment are still listed.

        Raises:
            StudentNotFoundError: If no active student has this ID.
        """
        student = self.roster.get(student_id)
        views = []
        for key, grade in sorted(student.enrollments.items()):
            course = self.catalog.find(key)
            if course is not None:
                views.append(EnrollmentView(course.code, course.name, grade))
                continue
            record = self.store.find_course(key)
            name = record.name if record is not None else key
            code = record.code if record is not None else key
            views.append(EnrollmentView(code, name, grade, course_active=False))
        return views

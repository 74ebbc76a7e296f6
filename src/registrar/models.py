"""In-memory entity model for courses and students."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from registrar.exceptions import ValidationError

MIN_CAPACITY = 1
MAX_CAPACITY = 100
MIN_GRADE = 0.0
MAX_GRADE = 100.0


class RecordState(StrEnum):
    """Lifecycle state of a course or student record."""

    ACTIVE = "active"
    DELETED = "deleted"


def normalize_key(identifier: str) -> str:
    """Return the case-insensitive identity key for a code or student ID."""
    return identifier.strip().upper()


def require_identifier(value: str, label: str) -> str:
    """Strip an identifier and reject it when blank."""
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} must not be blank")
    return value


def require_name(value: str, label: str = "Name") -> str:
    """Strip a display name and reject it when blank."""
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} must not be blank")
    return value


def validate_capacity(max_capacity: int) -> int:
    """Check that a course capacity lies within the allowed range.

    Args:
        max_capacity: Proposed maximum number of enrolled students.

    Returns:
        The capacity, unchanged.

    Raises:
        ValidationError: If the capacity is not an integer in [1, 100].
    """
    if isinstance(max_capacity, bool) or not isinstance(max_capacity, int):
        raise ValidationError(f"Capacity must be an integer, got {max_capacity!r}")
    if not MIN_CAPACITY <= max_capacity <= MAX_CAPACITY:
        raise ValidationError(
            f"Capacity must be between {MIN_CAPACITY} and {MAX_CAPACITY}, got {max_capacity}"
        )
    return max_capacity


def validate_grade(grade: float) -> float:
    """Check that a grade lies within [0, 100] and return it as a float.

    Raises:
        ValidationError: If the grade is not a number in range.
    """
    if isinstance(grade, bool) or not isinstance(grade, int | float):
        raise ValidationError(f"Grade must be a number, got {grade!r}")
    grade = float(grade)
    # NaN fails both comparisons
    if not MIN_GRADE <= grade <= MAX_GRADE:
        raise ValidationError(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}, got {grade}")
    return grade


@dataclass(eq=False)
class Course:
    """A course with a capacity-guarded enrollment counter.

    Attributes:
        code: Course code as entered. Equality ignores case.
        name: Display name.
        max_capacity: Maximum number of enrolled students (1-100).
        current_enrollment: Number of enrolled students.
        state: Active or soft-deleted.
    """

    code: str
    name: str
    max_capacity: int
    current_enrollment: int = 0
    state: RecordState = RecordState.ACTIVE

    def __post_init__(self) -> None:
        if not 0 <= self.current_enrollment <= self.max_capacity:
            raise ValidationError(
                f"Course '{self.code}' enrollment {self.current_enrollment} "
                f"outside 0..{self.max_capacity}"
            )

    @property
    def key(self) -> str:
        """Case-insensitive identity key."""
        return normalize_key(self.code)

    @property
    def remaining_capacity(self) -> int:
        return self.max_capacity - self.current_enrollment

    @property
    def can_enroll(self) -> bool:
        """True while the course has a free seat."""
        return self.current_enrollment < self.max_capacity

    @property
    def is_deleted(self) -> bool:
        return self.state is RecordState.DELETED

    @classmethod
    def from_record(cls, record: Any) -> Course:
        """Build a Course from a persisted course row."""
        return cls(
            code=record.code,
            name=record.name,
            max_capacity=record.max_capacity,
            current_enrollment=record.current_enrollment,
            state=RecordState(record.state),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Course):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.code} - {self.name}: {self.current_enrollment}/{self.max_capacity}"


@dataclass(eq=False)
class Student:
    """A student and the courses they are enrolled in.

    Attributes:
        student_id: Student ID as entered. Equality ignores case.
        name: Display name.
        enrollments: Course key -> grade, None until graded.
        state: Active or soft-deleted.
    """

    student_id: str
    name: str
    enrollments: dict[str, float | None] = field(default_factory=dict)
    state: RecordState = RecordState.ACTIVE

    @property
    def key(self) -> str:
        """Case-insensitive identity key."""
        return normalize_key(self.student_id)

    @property
    def is_deleted(self) -> bool:
        return self.state is RecordState.DELETED

    def is_enrolled(self, course_code: str) -> bool:
        """Return True if the student holds an enrollment for the course."""
        return normalize_key(course_code) in self.enrollments

    def grade_for(self, course_code: str) -> float | None:
        return self.enrollments.get(normalize_key(course_code))

    @classmethod
    def from_record(
        cls,
        record: Any,
        enrollments: list[tuple[str, float | None]] | None = None,
    ) -> Student:
        """Build a Student from a persisted row and its enrollment rows."""
        return cls(
            student_id=record.student_id,
            name=record.name,
            enrollments={normalize_key(code): grade for code, grade in enrollments or []},
            state=RecordState(record.state),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.student_id} - {self.name}"

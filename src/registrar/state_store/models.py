"""SQLAlchemy models for the enrollment store."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

from registrar.models import RecordState

# Identifiers compare case-insensitively in SQLite
CODE_TYPE = String(20, collation="NOCASE")
STUDENT_ID_TYPE = String(36, collation="NOCASE")


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class CourseRecord(Base):
    """Course row - stores capacity and the enrollment counter."""

    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("max_capacity BETWEEN 1 AND 100", name="ck_courses_capacity"),
        CheckConstraint(
            "current_enrollment >= 0 AND current_enrollment <= max_capacity",
            name="ck_courses_enrollment",
        ),
    )

    code: Mapped[str] = mapped_column(CODE_TYPE, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    current_enrollment: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    enrollments: Mapped[list[EnrollmentRecord]] = relationship(
        "EnrollmentRecord", back_populates="course"
    )

    def __init__(
        self,
        code: str,
        name: str,
        max_capacity: int,
        current_enrollment: int = 0,
        state: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.code = code
        self.name = name
        self.max_capacity = max_capacity
        self.current_enrollment = current_enrollment
        self.state = state if state is not None else RecordState.ACTIVE.value

    @property
    def record_state(self) -> RecordState:
        """Get state as RecordState enum."""
        return RecordState(self.state)

    def __repr__(self) -> str:
        return (
            f"<CourseRecord(code={self.code!r}, state={self.state!r}, "
            f"enrollment={self.current_enrollment}/{self.max_capacity})>"
        )


class StudentRecord(Base):
    """Student row."""

    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(STUDENT_ID_TYPE, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    enrollments: Mapped[list[EnrollmentRecord]] = relationship(
        "EnrollmentRecord", back_populates="student"
    )

    def __init__(
        self,
        student_id: str,
        name: str,
        state: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.name = name
        self.state = state if state is not None else RecordState.ACTIVE.value

    @property
    def record_state(self) -> RecordState:
        """Get state as RecordState enum."""
        return RecordState(self.state)

    def __repr__(self) -> str:
        return f"<StudentRecord(student_id={self.student_id!r}, state={self.state!r})>"


class EnrollmentRecord(Base):
    """Relationship row - one per (student, course) pair, with an optional grade."""

    __tablename__ = "enrollments"
    __table_args__ = (
        CheckConstraint("grade IS NULL OR (grade >= 0 AND grade <= 100)", name="ck_grade"),
    )

    student_id: Mapped[str] = mapped_column(
        STUDENT_ID_TYPE, ForeignKey("students.student_id"), primary_key=True
    )
    course_code: Mapped[str] = mapped_column(
        CODE_TYPE, ForeignKey("courses.code"), primary_key=True
    )
    grade: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    student: Mapped[StudentRecord] = relationship("StudentRecord", back_populates="enrollments")
    course: Mapped[CourseRecord] = relationship("CourseRecord", back_populates="enrollments")

    def __init__(
        self,
        student_id: str,
        course_code: str,
        grade: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_code = course_code
        self.grade = grade

    def __repr__(self) -> str:
        return (
            f"<EnrollmentRecord(student_id={self.student_id!r}, "
            f"course_code={self.course_code!r}, grade={self.grade!r})>"
        )

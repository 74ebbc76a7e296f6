"""StateStore - persistence gateway for courses, students and enrollments."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from registrar.exceptions import (
    AlreadyEnrolledError,
    CapacityExceededError,
    CourseExistsError,
    CourseNotFoundError,
    NotEnrolledError,
    RegistrarError,
    StorageError,
    StudentExistsError,
    StudentNotFoundError,
    ValidationError,
)
from registrar.models import RecordState
from registrar.state_store.database import Database
from registrar.state_store.models import CourseRecord, EnrollmentRecord, StudentRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error)
    return "UNIQUE constraint failed" in message or "PRIMARY KEY" in message


def _is_check_violation(error: IntegrityError) -> bool:
    return "CHECK constraint failed" in str(error)


class StateStore:
    """Main API for enrollment persistence.

    Every method runs in its own session and commits or rolls back as a unit.
    SQLAlchemy failures that are not a known constraint are logged and
    re-raised as StorageError.
    """

    def __init__(self, db_path: str = "registrar.db") -> None:
        """Initialize the store with a SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    @property
    def database(self) -> Database:
        return self._db

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        session = self._db.get_session()
        try:
            yield session
        except RegistrarError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Storage failure while %s", action)
            raise StorageError(f"Storage failure while {action}: {e}") from e
        finally:
            session.close()

    # --- Course Operations ---

    def create_course(self, code: str, name: str, max_capacity: int) -> CourseRecord:
        """Create a new active course with zero enrollment.

        Args:
            code: Course code, unique ignoring case
            name: Course name
            max_capacity: Maximum number of enrolled students

        Returns:
            The created CourseRecord

        Raises:
            CourseExistsError: If a course with the same code exists in any state
            ValidationError: If the row violates a check constraint
        """
        with self._session(f"creating course '{code}'") as session:
            if session.get(CourseRecord, code) is not None:
                raise CourseExistsError(f"Course with code '{code}' already exists")
            course = CourseRecord(code=code, name=name, max_capacity=max_capacity)
            session.add(course)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_unique_violation(e):
                    raise CourseExistsError(f"Course with code '{code}' already exists") from e
                if _is_check_violation(e):
                    raise ValidationError(f"Invalid course '{code}': {e.orig}") from e
                raise
            session.refresh(course)
            logger.debug("Created course %s (capacity %d)", code, max_capacity)
            return course

    def find_course(self, code: str) -> CourseRecord | None:
        """Get a course by code, in any state. Returns None if absent."""
        with self._session(f"loading course '{code}'") as session:
            return session.get(CourseRecord, code)

    def list_courses(self, state: RecordState | None = RecordState.ACTIVE) -> list[CourseRecord]:
        """List courses in the given state (None = all), ordered by code."""
        with self._session("listing courses") as session:
            stmt = select(CourseRecord)
            if state is not None:
                stmt = stmt.where(CourseRecord.state == state.value)
            stmt = stmt.order_by(CourseRecord.code)
            return list(session.execute(stmt).scalars().all())

    def set_course_state(self, code: str, state: RecordState) -> CourseRecord:
        """Soft-delete or restore a course. Counters are untouched.

        Raises:
            CourseNotFoundError: If the course doesn't exist
        """
        with self._session(f"setting course '{code}' {state}") as session:
            course = session.get(CourseRecord, code)
            if course is None:
                raise CourseNotFoundError(f"Course with code '{code}' not found")
            course.state = state.value
            session.commit()
            session.refresh(course)
            return course

    def rename_course(self, code: str, name: str) -> CourseRecord:
        """Change a course's name.

        Raises:
            CourseNotFoundError: If the course doesn't exist
        """
        return self.update_course(code, name=name)

    def resize_course(self, code: str, max_capacity: int) -> CourseRecord:
        """Change a course's capacity, guarded against current enrollment.

        Raises:
            CourseNotFoundError: If the course doesn't exist
            ValidationError: If max_capacity is below the current enrollment
        """
        return self.update_course(code, max_capacity=max_capacity)

    def update_course(
        self, code: str, name: str | None = None, max_capacity: int | None = None
    ) -> CourseRecord:
        """Change a course's name and/or capacity in one UPDATE.

        The enrollment guard runs in the UPDATE itself, so the stored counter
        can never end up above the stored capacity, and neither field changes
        unless both do.

        Raises:
            CourseNotFoundError: If the course doesn't exist
            ValidationError: If max_capacity is out of range or below the
                current enrollment
        """
        values: dict[str, object] = {}
        if name is not None:
            values["name"] = name
        if max_capacity is not None:
            values["max_capacity"] = max_capacity

        with self._session(f"updating course '{code}'") as session:
            if not values:
                course = session.get(CourseRecord, code)
                if course is None:
                    raise CourseNotFoundError(f"Course with code '{code}' not found")
                return course
            stmt = update(CourseRecord).where(CourseRecord.code == code)
            if max_capacity is not None:
                stmt = stmt.where(CourseRecord.current_enrollment <= max_capacity)
            try:
                result = session.execute(
                    stmt.values(**values).execution_options(synchronize_session=False)
                )
            except IntegrityError as e:
                session.rollback()
                if _is_check_violation(e):
                    raise ValidationError(f"Invalid capacity for '{code}': {e.orig}") from e
                raise
            if result.rowcount != 1:
                session.rollback()
                course = session.get(CourseRecord, code)
                if course is None:
                    raise CourseNotFoundError(f"Course with code '{code}' not found")
                raise ValidationError(
                    f"Capacity {max_capacity} is below current enrollment "
                    f"{course.current_enrollment} of course '{course.code}'"
                )
            session.commit()
            return session.get(CourseRecord, code)

    # --- Student Operations ---

    def create_student(self, student_id: str, name: str) -> StudentRecord:
        """Create a new active student.

        Raises:
            StudentExistsError: If a student with the same ID exists in any state
        """
        with self._session(f"creating student '{student_id}'") as session:
            if session.get(StudentRecord, student_id) is not None:
                raise StudentExistsError(f"Student with id '{student_id}' already exists")
            student = StudentRecord(student_id=student_id, name=name)
            session.add(student)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_unique_violation(e):
                    raise StudentExistsError(
                        f"Student with id '{student_id}' already exists"
                    ) from e
                raise
            session.refresh(student)
            logger.debug("Created student %s", student_id)
            return student

    def find_student(self, student_id: str) -> StudentRecord | None:
        """Get a student by ID, in any state. Returns None if absent."""
        with self._session(f"loading student '{student_id}'") as session:
            return session.get(StudentRecord, student_id)

    def list_students(
        self, state: RecordState | None = RecordState.ACTIVE
    ) -> list[StudentRecord]:
        """List students in the given state (None = all), ordered by ID."""
        with self._session("listing students") as session:
            stmt = select(StudentRecord)
            if state is not None:
                stmt = stmt.where(StudentRecord.state == state.value)
            stmt = stmt.order_by(StudentRecord.student_id)
            return list(session.execute(stmt).scalars().all())

    def set_student_state(self, student_id: str, state: RecordState) -> StudentRecord:
        """Soft-delete or restore a student. Enrollment rows are untouched.

        Raises:
            StudentNotFoundError: If the student doesn't exist
        """
        with self._session(f"setting student '{student_id}' {state}") as session:
            student = session.get(StudentRecord, student_id)
            if student is None:
                raise StudentNotFoundError(f"Student with id '{student_id}' not found")
            student.state = state.value
            session.commit()
            session.refresh(student)
            return student

    def rename_student(self, student_id: str, name: str) -> StudentRecord:
        """Change a student's name.

        Raises:
            StudentNotFoundError: If the student doesn't exist
        """
        with self._session(f"renaming student '{student_id}'") as session:
            student = session.get(StudentRecord, student_id)
            if student is None:
                raise StudentNotFoundError(f"Student with id '{student_id}' not found")
            student.name = name
            session.commit()
            session.refresh(student)
            return student

    # --- Enrollment Operations ---

    def enroll_atomic(self, student_id: str, course_code: str) -> EnrollmentRecord:
        """Increment the course counter and insert the enrollment row as one unit.

        The counter increment is a conditional UPDATE that only matches while
        current_enrollment < max_capacity. The relationship row is inserted in
        the same transaction, so either both effects commit or neither does.

        Args:
            student_id: The student's ID
            course_code: The course code

        Returns:
            The created EnrollmentRecord (grade is None)

        Raises:
            StudentNotFoundError: If the student doesn't exist or is deleted
            CourseNotFoundError: If the course doesn't exist or is deleted
            AlreadyEnrolledError: If the pair already has a relationship row
            CapacityExceededError: If the course is full
        """
        with self._session(f"enrolling '{student_id}' in '{course_code}'") as session:
            student = session.get(StudentRecord, student_id)
            if student is None or student.record_state is not RecordState.ACTIVE:
                raise StudentNotFoundError(f"Student with id '{student_id}' not found")
            course = session.get(CourseRecord, course_code)
            if course is None or course.record_state is not RecordState.ACTIVE:
                raise CourseNotFoundError(f"Course with code '{course_code}' not found")

            pair = (student.student_id, course.code)
            if session.get(EnrollmentRecord, pair) is not None:
                raise AlreadyEnrolledError(
                    f"Student '{student.student_id}' is already enrolled in '{course.code}'"
                )

            result = session.execute(
                update(CourseRecord)
                .where(
                    CourseRecord.code == course.code,
                    CourseRecord.current_enrollment < CourseRecord.max_capacity,
                )
                .values(current_enrollment=CourseRecord.current_enrollment + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise CapacityExceededError(
                    f"Course '{course.code}' is full ({course.max_capacity} students)"
                )

            enrollment = EnrollmentRecord(student_id=student.student_id, course_code=course.code)
            session.add(enrollment)
            try:
                session.commit()
            except IntegrityError as e:
                # Rolls back the counter increment as well
                session.rollback()
                if _is_unique_violation(e):
                    raise AlreadyEnrolledError(
                        f"Student '{student.student_id}' is already enrolled in '{course.code}'"
                    ) from e
                raise
            session.refresh(enrollment)
            logger.debug("Enrolled %s in %s", student.student_id, course.code)
            return enrollment

    def set_grade(self, student_id: str, course_code: str, grade: float) -> EnrollmentRecord:
        """Store a grade for an existing enrollment.

        Raises:
            NotEnrolledError: If the pair has no relationship row
            ValidationError: If the grade violates the check constraint
        """
        with self._session(f"grading '{student_id}' in '{course_code}'") as session:
            enrollment = session.get(EnrollmentRecord, (student_id, course_code))
            if enrollment is None:
                raise NotEnrolledError(
                    f"Student '{student_id}' is not enrolled in '{course_code}'"
                )
            enrollment.grade = grade
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_check_violation(e):
                    raise ValidationError(f"Invalid grade {grade!r}") from e
                raise
            session.refresh(enrollment)
            return enrollment

    def list_enrollments(self, student_id: str) -> list[EnrollmentRecord]:
        """List a student's enrollment rows, ordered by course code."""
        with self._session(f"listing enrollments of '{student_id}'") as session:
            stmt = (
                select(EnrollmentRecord)
                .where(EnrollmentRecord.student_id == student_id)
                .order_by(EnrollmentRecord.course_code)
            )
            return list(session.execute(stmt).scalars().all())

    def count_enrollments(self, course_code: str) -> int:
        """Count relationship rows for a course."""
        with self._session(f"counting enrollments of '{course_code}'") as session:
            stmt = select(func.count()).where(EnrollmentRecord.course_code == course_code)
            return int(session.execute(stmt).scalar_one())

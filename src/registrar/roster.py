"""Student Roster - student lifecycle and enrollment maps."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from registrar.exceptions import StudentExistsError, StudentNotFoundError
from registrar.models import (
    RecordState,
    Student,
    normalize_key,
    require_identifier,
    require_name,
)

if TYPE_CHECKING:
    from registrar.state_store import StateStore, StudentRecord

logger = logging.getLogger(__name__)


class StudentRoster:
    """Owns student lifecycle state.

    Mirrors CourseCatalog. Each cached student carries its enrollment map,
    filled from storage when the student is loaded or restored and otherwise
    changed only by the enrollment coordinator.
    """

    def __init__(self, store: StateStore) -> None:
        self._store = store
        self._active: dict[str, Student] = {}
        self.reload()

    def _hydrate(self, record: StudentRecord) -> Student:
        enrollments = self._store.list_enrollments(record.student_id)
        return Student.from_record(record, [(e.course_code, e.grade) for e in enrollments])

    def reload(self) -> None:
        """Replace the working set with the active students in storage."""
        records = self._store.list_students(RecordState.ACTIVE)
        self._active = {normalize_key(r.student_id): self._hydrate(r) for r in records}
        logger.info("Loaded %d active students", len(self._active))

    def find(self, student_id: str) -> Student | None:
        """Look up an active student by ID, ignoring case."""
        return self._active.get(normalize_key(student_id))

    def get(self, student_id: str) -> Student:
        """Look up an active student by ID.

        Raises:
            StudentNotFoundError: If no active student has this ID.
        """
        student = self.find(student_id)
        if student is None:
            raise StudentNotFoundError(f"Student with id '{student_id}' not found")
        return student

    def list_students(self) -> list[Student]:
        """Active students ordered by ID."""
        return sorted(self._active.values(), key=lambda s: s.key)

    def list_deleted_students(self) -> list[Student]:
        """Soft-deleted students, read from storage, ordered by ID."""
        return [Student.from_record(r) for r in self._store.list_students(RecordState.DELETED)]

    def add_student(self, student_id: str, name: str) -> Student:
        """Create a student with no enrollments.

        Raises:
            ValidationError: On blank ID or name.
            StudentExistsError: If the ID is taken by an active or deleted student.
            StorageError: If the write fails.
        """
        student_id = require_identifier(student_id, "Student ID")
        name = require_name(name, "Student name")

        if self.find(student_id) is not None or self._store.find_student(student_id) is not None:
            raise StudentExistsError(f"Student with id '{student_id}' already exists")

        record = self._store.create_student(student_id, name)
        student = Student.from_record(record)
        self._active[student.key] = student
        logger.info("Added student %s (%s)", student.student_id, student.name)
        return student

    def remove_student(self, student_id: str) -> None:
        """Soft-delete an active student. Enrollment rows are kept.

        Raises:
            StudentNotFoundError: If no active student has this ID.
        """
        student = self.get(student_id)
        self._store.set_student_state(student.student_id, RecordState.DELETED)
        del self._active[student.key]
        student.state = RecordState.DELETED
        logger.info("Removed student %s", student.student_id)

    def restore_student(self, student_id: str) -> Student:
        """Reactivate a soft-deleted student together with its enrollments.

        Raises:
            StudentNotFoundError: If no soft-deleted student has this ID.
        """
        student_id = require_identifier(student_id, "Student ID")
        record = self._store.find_student(student_id)
        if record is None or record.record_state is not RecordState.DELETED:
            raise StudentNotFoundError(f"Deleted student with id '{student_id}' not found")
        record = self._store.set_student_state(record.student_id, RecordState.ACTIVE)
        student = self._hydrate(record)
        self._active[student.key] = student
        logger.info("Restored student %s", student.student_id)
        return student

    def rename_student(self, student_id: str, new_name: str) -> Student:
        """Change an active student's name.

        Raises:
            StudentNotFoundError: If no active student has this ID.
            ValidationError: If the new name is blank.
        """
        new_name = require_name(new_name, "Student name")
        student = self.get(student_id)
        self._store.rename_student(student.student_id, new_name)
        student.name = new_name
        logger.info("Renamed student %s to %s", student.student_id, new_name)
        return student

    def record_enrollment(self, student: Student, course_code: str) -> None:
        """Mirror a committed enrollment in the student's map (ungraded)."""
        student.enrollments[normalize_key(course_code)] = None

    def record_grade(self, student: Student, course_code: str, grade: float) -> None:
        """Mirror a committed grade in the student's map."""
        student.enrollments[normalize_key(course_code)] = grade

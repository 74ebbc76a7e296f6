"""Course Catalog - course lifecycle and the active working set."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from registrar.exceptions import CourseExistsError, CourseNotFoundError, ValidationError
from registrar.models import (
    Course,
    RecordState,
    normalize_key,
    require_identifier,
    require_name,
    validate_capacity,
)

if TYPE_CHECKING:
    from registrar.state_store import StateStore

logger = logging.getLogger(__name__)


class CourseCatalog:
    """Owns course lifecycle state.

    Active courses are cached in memory, keyed by their case-insensitive code.
    Every mutation is written to the store first; the cache only changes once
    the store has confirmed the write.
    """

    def __init__(self, store: StateStore) -> None:
        """Initialize the catalog and load active courses from the store.

        Args:
            store: Persistence gateway.
        """
        self._store = store
        self._active: dict[str, Course] = {}
        self.reload()

    def reload(self) -> None:
        """Replace the working set with the active courses in storage."""
        records = self._store.list_courses(RecordState.ACTIVE)
        self._active = {normalize_key(r.code): Course.from_record(r) for r in records}
        logger.info("Loaded %d active courses", len(self._active))

    def find(self, code: str) -> Course | None:
        """Look up an active course by code, ignoring case."""
        return self._active.get(normalize_key(code))

    def get(self, code: str) -> Course:
        """Look up an active course by code.

        Raises:
            CourseNotFoundError: If no active course has this code.
        """
        course = self.find(code)
        if course is None:
            raise CourseNotFoundError(f"Course with code '{code}' not found")
        return course

    def list_courses(self) -> list[Course]:
        """Active courses ordered by code."""
        return sorted(self._active.values(), key=lambda c: c.key)

    def list_deleted_courses(self) -> list[Course]:
        """Soft-deleted courses, read from storage, ordered by code."""
        return [Course.from_record(r) for r in self._store.list_courses(RecordState.DELETED)]

    def total_enrolled(self) -> int:
        """Total enrollments across active courses, derived from the counters."""
        return sum(course.current_enrollment for course in self._active.values())

    def add_course(self, code: str, name: str, max_capacity: int) -> Course:
        """Create a course and add it to the active set.

        Args:
            code: Course code, unique ignoring case across active and deleted courses.
            name: Non-blank course name.
            max_capacity: Capacity between 1 and 100.

        Returns:
            The new Course with zero enrollment.

        Raises:
            ValidationError: On blank code/name or out-of-range capacity.
            CourseExistsError: If the code is already taken.
            StorageError: If the write fails.
        """
        code = require_identifier(code, "Course code")
        name = require_name(name, "Course name")
        validate_capacity(max_capacity)

        if self.find(code) is not None or self._store.find_course(code) is not None:
            raise CourseExistsError(f"Course with code '{code}' already exists")

        record = self._store.create_course(code, name, max_capacity)
        course = Course.from_record(record)
        self._active[course.key] = course
        logger.info("Added course %s (%s, capacity %d)", course.code, course.name, max_capacity)
        return course

    def remove_course(self, code: str) -> None:
        """Soft-delete an active course. Existing enrollments are kept.

        Raises:
            CourseNotFoundError: If no active course has this code.
        """
        course = self.get(code)
        self._store.set_course_state(course.code, RecordState.DELETED)
        del self._active[course.key]
        course.state = RecordState.DELETED
        logger.info("Removed course %s", course.code)

    def restore_course(self, code: str) -> Course:
        """Reactivate a soft-deleted course with its counters untouched.

        Raises:
            CourseNotFoundError: If no soft-deleted course has this code.
        """
        code = require_identifier(code, "Course code")
        record = self._store.find_course(code)
        if record is None or record.record_state is not RecordState.DELETED:
            raise CourseNotFoundError(f"Deleted course with code '{code}' not found")
        record = self._store.set_course_state(record.code, RecordState.ACTIVE)
        course = Course.from_record(record)
        self._active[course.key] = course
        logger.info(
            "Restored course %s (%d/%d enrolled)",
            course.code,
            course.current_enrollment,
            course.max_capacity,
        )
        return course

    def rename_course(self, code: str, new_name: str) -> Course:
        """Change an active course's name.

        Raises:
            CourseNotFoundError: If no active course has this code.
            ValidationError: If the new name is blank.
        """
        new_name = require_name(new_name, "Course name")
        course = self.get(code)
        self._store.rename_course(course.code, new_name)
        course.name = new_name
        logger.info("Renamed course %s to %s", course.code, new_name)
        return course

    def resize_course(self, code: str, new_max_capacity: int) -> Course:
        """Change an active course's capacity.

        A capacity below the current enrollment is rejected rather than clamped.

        Raises:
            CourseNotFoundError: If no active course has this code.
            ValidationError: If the capacity is out of range or below enrollment.
        """
        course = self.get(code)
        self._check_capacity(course, new_max_capacity)
        self._store.resize_course(course.code, new_max_capacity)
        course.max_capacity = new_max_capacity
        logger.info("Resized course %s to capacity %d", course.code, new_max_capacity)
        return course

    def update_course(
        self,
        code: str,
        new_name: str | None = None,
        new_max_capacity: int | None = None,
    ) -> Course:
        """Rename and/or resize an active course as one change.

        Both values are checked before anything is written; if either is
        rejected the course is left as it was.

        Raises:
            CourseNotFoundError: If no active course has this code.
            ValidationError: If the name is blank or the capacity is out of
                range or below enrollment.
        """
        course = self.get(code)
        if new_name is not None:
            new_name = require_name(new_name, "Course name")
        if new_max_capacity is not None:
            self._check_capacity(course, new_max_capacity)
        if new_name is None and new_max_capacity is None:
            return course

        self._store.update_course(course.code, name=new_name, max_capacity=new_max_capacity)
        if new_name is not None:
            course.name = new_name
        if new_max_capacity is not None:
            course.max_capacity = new_max_capacity
        logger.info(
            "Updated course %s (name=%s, capacity=%d)",
            course.code,
            course.name,
            course.max_capacity,
        )
        return course

    def _check_capacity(self, course: Course, new_max_capacity: int) -> None:
        validate_capacity(new_max_capacity)
        if new_max_capacity < course.current_enrollment:
            raise ValidationError(
                f"Capacity {new_max_capacity} is below current enrollment "
                f"{course.current_enrollment} of course '{course.code}'"
            )

    def record_enrollment(self, course: Course) -> None:
        """Mirror a committed enrollment in the cached counter.

        Only called by the enrollment coordinator after the store has
        committed the guarded increment.
        """
        course.current_enrollment += 1

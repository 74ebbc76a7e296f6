"""Unit tests for StateStore course operations."""

import pytest

from registrar.exceptions import CourseExistsError, CourseNotFoundError, ValidationError
from registrar.models import RecordState
from registrar.state_store import StateStore


@pytest.mark.unit
class TestCreateCourse:
    """Tests for create_course."""

    def test_create_course(self, store: StateStore) -> None:
        course = store.create_course("CS101", "Intro to CS", 30)

        assert course.code == "CS101"
        assert course.name == "Intro to CS"
        assert course.max_capacity == 30
        assert course.current_enrollment == 0
        assert course.record_state is RecordState.ACTIVE
        assert course.created_at is not None

    def test_duplicate_code_raises(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)

        with pytest.raises(CourseExistsError) as exc_info:
            store.create_course("CS101", "Again", 10)

        assert "CS101" in str(exc_info.value)

    def test_duplicate_code_ignores_case(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)

        with pytest.raises(CourseExistsError):
            store.create_course("cs101", "Lowercase", 10)

    def test_duplicate_of_deleted_course_raises(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)
        store.set_course_state("CS101", RecordState.DELETED)

        with pytest.raises(CourseExistsError):
            store.create_course("CS101", "Intro", 30)

    def test_capacity_check_constraint(self, store: StateStore) -> None:
        with pytest.raises(ValidationError):
            store.create_course("CS101", "Intro", 0)


@pytest.mark.unit
class TestFindAndListCourses:
    """Tests for find_course and list_courses."""

    def test_find_course_ignores_case(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)

        found = store.find_course("cs101")

        assert found is not None
        assert found.code == "CS101"

    def test_find_missing_course_returns_none(self, store: StateStore) -> None:
        assert store.find_course("NOPE") is None

    def test_list_courses_by_state(self, store: StateStore) -> None:
        store.create_course("MA201", "Calculus", 20)
        store.create_course("CS101", "Intro", 30)
        store.create_course("PH100", "Physics", 25)
        store.set_course_state("PH100", RecordState.DELETED)

        active = store.list_courses(RecordState.ACTIVE)
        deleted = store.list_courses(RecordState.DELETED)
        everything = store.list_courses(None)

        assert [c.code for c in active] == ["CS101", "MA201"]
        assert [c.code for c in deleted] == ["PH100"]
        assert len(everything) == 3


@pytest.mark.unit
class TestUpdateCourse:
    """Tests for set_course_state, rename_course and resize_course."""

    def test_set_state_missing_course_raises(self, store: StateStore) -> None:
        with pytest.raises(CourseNotFoundError):
            store.set_course_state("NOPE", RecordState.DELETED)

    def test_delete_and_restore_keep_counters(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 2)
        store.create_student("S1", "Ada")
        store.enroll_atomic("S1", "CS101")

        store.set_course_state("CS101", RecordState.DELETED)
        restored = store.set_course_state("CS101", RecordState.ACTIVE)

        assert restored.record_state is RecordState.ACTIVE
        assert restored.max_capacity == 2
        assert restored.current_enrollment == 1

    def test_rename_course(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)

        renamed = store.rename_course("cs101", "Introduction to CS")

        assert renamed.name == "Introduction to CS"
        assert store.find_course("CS101").name == "Introduction to CS"

    def test_rename_missing_course_raises(self, store: StateStore) -> None:
        with pytest.raises(CourseNotFoundError):
            store.rename_course("NOPE", "Name")

    def test_resize_course(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)

        resized = store.resize_course("CS101", 45)

        assert resized.max_capacity == 45

    def test_resize_below_enrollment_rejected(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 3)
        store.create_student("S1", "Ada")
        store.create_student("S2", "Grace")
        store.enroll_atomic("S1", "CS101")
        store.enroll_atomic("S2", "CS101")

        with pytest.raises(ValidationError, match="below current enrollment"):
            store.resize_course("CS101", 1)

        assert store.find_course("CS101").max_capacity == 3

    def test_resize_to_current_enrollment_allowed(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 3)
        store.create_student("S1", "Ada")
        store.enroll_atomic("S1", "CS101")

        assert store.resize_course("CS101", 1).max_capacity == 1

    def test_resize_out_of_range_rejected(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 3)

        with pytest.raises(ValidationError):
            store.resize_course("CS101", 101)

    def test_resize_missing_course_raises(self, store: StateStore) -> None:
        with pytest.raises(CourseNotFoundError):
            store.resize_course("NOPE", 10)

    def test_update_name_and_capacity_together(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)

        updated = store.update_course("cs101", name="Introduction", max_capacity=40)

        assert (updated.name, updated.max_capacity) == ("Introduction", 40)

    def test_update_rejected_capacity_keeps_name(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 2)
        store.create_student("S1", "Ada")
        store.create_student("S2", "Grace")
        store.enroll_atomic("S1", "CS101")
        store.enroll_atomic("S2", "CS101")

        with pytest.raises(ValidationError, match="below current enrollment"):
            store.update_course("CS101", name="Renamed", max_capacity=1)

        course = store.find_course("CS101")
        assert (course.name, course.max_capacity) == ("Intro", 2)

    def test_update_without_changes_returns_course(self, store: StateStore) -> None:
        store.create_course("CS101", "Intro", 30)

        assert store.update_course("CS101").name == "Intro"

        with pytest.raises(CourseNotFoundError):
            store.update_course("NOPE")

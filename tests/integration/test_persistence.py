"""Integration tests for state surviving a restart."""

import tempfile
from pathlib import Path

import pytest

from registrar.config import Settings
from registrar.coordinator import EnrollmentOutcome
from registrar.registrar import Registrar


@pytest.fixture
def temp_db_path() -> str:
    """Create a temporary database path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = f.name
    yield path
    # Cleanup
    Path(path).unlink(missing_ok=True)
    Path(f"{path}-wal").unlink(missing_ok=True)
    Path(f"{path}-shm").unlink(missing_ok=True)


@pytest.fixture
def file_settings(temp_db_path: str) -> Settings:
    """Settings pointing at the temporary database file."""
    return Settings(db_path=temp_db_path, log_to_console=False)


@pytest.mark.integration
class TestRestart:
    """State written by one Registrar is seen by the next."""

    def test_counters_grades_and_states_survive(self, file_settings: Settings) -> None:
        first = Registrar(file_settings)
        first.catalog.add_course("CS101", "Intro to CS", 2)
        first.catalog.add_course("OLD100", "Retired", 5)
        first.roster.add_student("S1", "Ada")
        first.roster.add_student("S2", "Grace")
        first.coordinator.enroll("S1", "CS101")
        first.coordinator.enroll("S2", "CS101")
        first.coordinator.enroll("S1", "OLD100")
        first.coordinator.assign_grade("S1", "CS101", 90.0)
        first.catalog.remove_course("OLD100")
        first.roster.remove_student("S2")
        first.close()

        second = Registrar(file_settings)
        try:
            course = second.catalog.get("CS101")
            assert course.current_enrollment == 2
            assert course.max_capacity == 2
            assert second.catalog.find("OLD100") is None
            assert second.roster.find("S2") is None

            student = second.roster.get("S1")
            assert student.enrollments == {"CS101": 90.0, "OLD100": None}
            assert second.coordinator.overall_grade(student) == 90.0

            restored = second.catalog.restore_course("OLD100")
            assert restored.current_enrollment == 1
            assert second.roster.restore_student("S2").enrollments == {"CS101": None}
        finally:
            second.close()

    def test_full_course_stays_full_after_restart(self, file_settings: Settings) -> None:
        first = Registrar(file_settings)
        first.catalog.add_course("CS101", "Intro", 1)
        first.roster.add_student("S1", "Ada")
        first.roster.add_student("S2", "Grace")
        first.coordinator.enroll("S1", "CS101")
        first.close()

        second = Registrar(file_settings)
        try:
            result = second.coordinator.enroll("S2", "CS101")
            assert result.outcome is EnrollmentOutcome.CAPACITY_EXCEEDED
        finally:
            second.close()


@pytest.mark.integration
class TestStaleCache:
    """The store's guarded increment holds even when a cache is out of date."""

    def test_second_writer_cannot_overfill(self, file_settings: Settings) -> None:
        a = Registrar(file_settings)
        a.catalog.add_course("CS101", "Intro", 1)
        a.roster.add_student("S1", "Ada")
        a.roster.add_student("S2", "Grace")

        # Loaded while the course still has a free seat
        b = Registrar(file_settings)
        try:
            assert a.coordinator.enroll("S1", "CS101").ok
            assert b.catalog.get("CS101").current_enrollment == 0

            result = b.coordinator.enroll("S2", "CS101")

            assert result.outcome is EnrollmentOutcome.CAPACITY_EXCEEDED
            assert b.catalog.get("CS101").current_enrollment == 0
            assert b.store.find_course("CS101").current_enrollment == 1
            assert b.store.count_enrollments("CS101") == 1
        finally:
            a.close()
            b.close()

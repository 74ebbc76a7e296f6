"""Unit tests for course routes."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from registrar.exceptions import StorageError
from registrar.registrar import Registrar


@pytest.mark.unit
class TestListCourses:
    """Tests for GET /courses."""

    def test_list_courses_empty(self, client: TestClient) -> None:
        """Returns empty list when no courses."""
        response = client.get("/api/v1/courses")

        assert response.status_code == 200
        data = response.json()
        assert data["data"] == []
        assert data["error"] is None

    def test_list_courses_ordered_by_code(self, client: TestClient, registrar: Registrar) -> None:
        """Returns active courses ordered by code."""
        registrar.catalog.add_course("MA201", "Calculus", 20)
        registrar.catalog.add_course("CS101", "Intro to CS", 30)

        response = client.get("/api/v1/courses")

        assert response.status_code == 200
        codes = [c["code"] for c in response.json()["data"]]
        assert codes == ["CS101", "MA201"]

    def test_list_deleted_courses(self, client: TestClient, registrar: Registrar) -> None:
        """Soft-deleted courses are only listed under /deleted."""
        registrar.catalog.add_course("CS101", "Intro", 30)
        registrar.catalog.add_course("OLD100", "Retired", 30)
        registrar.catalog.remove_course("OLD100")

        active = client.get("/api/v1/courses").json()["data"]
        deleted = client.get("/api/v1/courses/deleted").json()["data"]

        assert [c["code"] for c in active] == ["CS101"]
        assert [c["code"] for c in deleted] == ["OLD100"]
        assert deleted[0]["state"] == "deleted"


@pytest.mark.unit
class TestCreateCourse:
    """Tests for POST /courses."""

    def test_create_course_success(self, client: TestClient) -> None:
        """201 with created course."""
        response = client.post(
            "/api/v1/courses",
            json={"code": "CS101", "name": "Intro to CS", "max_capacity": 30},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["code"] == "CS101"
        assert data["max_capacity"] == 30
        assert data["current_enrollment"] == 0
        assert data["remaining_capacity"] == 30
        assert data["state"] == "active"

    def test_create_course_default_capacity(self, client: TestClient, registrar: Registrar) -> None:
        """Capacity falls back to the configured default."""
        response = client.post("/api/v1/courses", json={"code": "CS101", "name": "Intro"})

        assert response.status_code == 201
        assert response.json()["data"]["max_capacity"] == registrar.settings.default_capacity

    def test_create_course_duplicate(self, client: TestClient) -> None:
        """409 when the code is taken, ignoring case."""
        client.post("/api/v1/courses", json={"code": "CS101", "name": "Intro"})

        response = client.post("/api/v1/courses", json={"code": "cs101", "name": "Again"})

        assert response.status_code == 409
        assert response.json()["data"] is None
        assert "already exists" in response.json()["error"]

    @pytest.mark.parametrize("capacity", [0, 101])
    def test_create_course_capacity_out_of_range(self, client: TestClient, capacity: int) -> None:
        """422 for capacity outside 1-100."""
        response = client.post(
            "/api/v1/courses",
            json={"code": "CS101", "name": "Intro", "max_capacity": capacity},
        )

        assert response.status_code == 422

    def test_create_course_blank_name(self, client: TestClient) -> None:
        """422 for a whitespace-only name."""
        response = client.post("/api/v1/courses", json={"code": "CS101", "name": "   "})

        assert response.status_code == 422
        assert response.json()["error"] is not None

    def test_create_course_storage_error(self, client: TestClient, registrar: Registrar) -> None:
        """500 with a generic message when the write fails."""
        with patch.object(registrar.store, "create_course", side_effect=StorageError("disk")):
            response = client.post("/api/v1/courses", json={"code": "CS101", "name": "Intro"})

        assert response.status_code == 500
        assert response.json()["error"] == "Storage error"


@pytest.mark.unit
class TestGetCourse:
    """Tests for GET /courses/{code}."""

    def test_get_course_ignores_case(self, client: TestClient, registrar: Registrar) -> None:
        registrar.catalog.add_course("CS101", "Intro", 30)

        response = client.get("/api/v1/courses/cs101")

        assert response.status_code == 200
        assert response.json()["data"]["code"] == "CS101"

    def test_get_course_not_found(self, client: TestClient) -> None:
        response = client.get("/api/v1/courses/NOPE")

        assert response.status_code == 404
        assert response.json()["data"] is None

    def test_get_deleted_course_not_found(self, client: TestClient, registrar: Registrar) -> None:
        registrar.catalog.add_course("CS101", "Intro", 30)
        registrar.catalog.remove_course("CS101")

        assert client.get("/api/v1/courses/CS101").status_code == 404


@pytest.mark.unit
class TestUpdateCourse:
    """Tests for PATCH /courses/{code}."""

    def test_rename_and_resize(self, client: TestClient, registrar: Registrar) -> None:
        registrar.catalog.add_course("CS101", "Intro", 30)

        response = client.patch(
            "/api/v1/courses/CS101",
            json={"name": "Introduction", "max_capacity": 40},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Introduction"
        assert data["max_capacity"] == 40

    def test_resize_below_enrollment(self, client: TestClient, registrar: Registrar) -> None:
        """422 and nothing changed when shrinking below enrollment."""
        registrar.catalog.add_course("CS101", "Intro", 5)
        registrar.roster.add_student("S1", "Ada")
        registrar.roster.add_student("S2", "Grace")
        registrar.coordinator.enroll("S1", "CS101")
        registrar.coordinator.enroll("S2", "CS101")

        response = client.patch(
            "/api/v1/courses/CS101", json={"name": "Renamed", "max_capacity": 1}
        )

        assert response.status_code == 422
        course = registrar.catalog.get("CS101")
        assert course.max_capacity == 5
        assert course.name == "Intro"

    def test_blank_name_with_resize_changes_nothing(
        self, client: TestClient, registrar: Registrar
    ) -> None:
        """422 and capacity untouched when the new name is rejected."""
        registrar.catalog.add_course("CS101", "Intro", 30)

        response = client.patch(
            "/api/v1/courses/CS101", json={"name": "   ", "max_capacity": 40}
        )

        assert response.status_code == 422
        course = registrar.catalog.get("CS101")
        assert course.max_capacity == 30
        assert course.name == "Intro"
        stored = registrar.store.find_course("CS101")
        assert stored.max_capacity == 30
        assert stored.name == "Intro"

    def test_update_missing_course(self, client: TestClient) -> None:
        response = client.patch("/api/v1/courses/NOPE", json={"name": "X"})

        assert response.status_code == 404


@pytest.mark.unit
class TestDeleteRestoreCourse:
    """Tests for DELETE /courses/{code} and POST /courses/{code}/restore."""

    def test_delete_course(self, client: TestClient, registrar: Registrar) -> None:
        """204 on soft delete."""
        registrar.catalog.add_course("CS101", "Intro", 30)

        response = client.delete("/api/v1/courses/CS101")

        assert response.status_code == 204
        assert registrar.catalog.find("CS101") is None

    def test_delete_missing_course(self, client: TestClient) -> None:
        assert client.delete("/api/v1/courses/NOPE").status_code == 404

    def test_restore_course(self, client: TestClient, registrar: Registrar) -> None:
        registrar.catalog.add_course("CS101", "Intro", 30)
        registrar.catalog.remove_course("CS101")

        response = client.post("/api/v1/courses/cs101/restore")

        assert response.status_code == 200
        assert response.json()["data"]["state"] == "active"
        assert registrar.catalog.find("CS101") is not None

    def test_restore_active_course(self, client: TestClient, registrar: Registrar) -> None:
        registrar.catalog.add_course("CS101", "Intro", 30)

        assert client.post("/api/v1/courses/CS101/restore").status_code == 404


@pytest.mark.unit
class TestCatalogStats:
    """Tests for GET /courses/stats."""

    def test_stats(self, client: TestClient, registrar: Registrar) -> None:
        registrar.catalog.add_course("CS101", "Intro", 30)
        registrar.catalog.add_course("MA201", "Calculus", 30)
        registrar.roster.add_student("S1", "Ada")
        registrar.coordinator.enroll("S1", "CS101")
        registrar.coordinator.enroll("S1", "MA201")

        response = client.get("/api/v1/courses/stats")

        assert response.status_code == 200
        assert response.json()["data"] == {"active_courses": 2, "total_enrolled": 2}

"""Course lifecycle endpoints."""

from fastapi import APIRouter, status

from registrar.api.dependencies import RegistrarDep
from registrar.api.models import (
    APIResponse,
    CatalogStatsResponse,
    CourseCreate,
    CourseResponse,
    CourseUpdate,
    course_to_response,
)

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def list_courses(registrar: RegistrarDep) -> APIResponse[list[CourseResponse]]:
    """List active courses."""
    courses = registrar.catalog.list_courses()
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.get("/deleted", response_model=APIResponse[list[CourseResponse]])
def list_deleted_courses(registrar: RegistrarDep) -> APIResponse[list[CourseResponse]]:
    """List soft-deleted courses."""
    courses = registrar.catalog.list_deleted_courses()
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.get("/stats", response_model=APIResponse[CatalogStatsResponse])
def get_catalog_stats(registrar: RegistrarDep) -> APIResponse[CatalogStatsResponse]:
    """Total enrollments across active courses."""
    return APIResponse(
        data=CatalogStatsResponse(
            active_courses=len(registrar.catalog.list_courses()),
            total_enrolled=registrar.catalog.total_enrolled(),
        )
    )


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(course: CourseCreate, registrar: RegistrarDep) -> APIResponse[CourseResponse]:
    """Create a new course."""
    max_capacity = course.max_capacity
    if max_capacity is None:
        max_capacity = registrar.settings.default_capacity
    created = registrar.catalog.add_course(course.code, course.name, max_capacity)
    return APIResponse(data=course_to_response(created))


@router.get("/{code}", response_model=APIResponse[CourseResponse])
def get_course(code: str, registrar: RegistrarDep) -> APIResponse[CourseResponse]:
    """Get an active course by code."""
    return APIResponse(data=course_to_response(registrar.catalog.get(code)))


@router.patch("/{code}", response_model=APIResponse[CourseResponse])
def update_course(
    code: str, course: CourseUpdate, registrar: RegistrarDep
) -> APIResponse[CourseResponse]:
    """Rename and/or resize a course (partial update, applied all or nothing)."""
    updated = registrar.catalog.update_course(
        code, new_name=course.name, new_max_capacity=course.max_capacity
    )
    return APIResponse(data=course_to_response(updated))


@router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(code: str, registrar: RegistrarDep) -> None:
    """Soft-delete a course."""
    registrar.catalog.remove_course(code)


@router.post("/{code}/restore", response_model=APIResponse[CourseResponse])
def restore_course(code: str, registrar: RegistrarDep) -> APIResponse[CourseResponse]:
    """Restore a soft-deleted course."""
    return APIResponse(data=course_to_response(registrar.catalog.restore_course(code)))

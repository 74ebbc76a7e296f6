"""Student lifecycle endpoints."""

from fastapi import APIRouter, status

from registrar.api.dependencies import RegistrarDep
from registrar.api.models import (
    APIResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
    student_to_response,
)

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=APIResponse[list[StudentResponse]])
def list_students(registrar: RegistrarDep) -> APIResponse[list[StudentResponse]]:
    """List active students."""
    students = registrar.roster.list_students()
    return APIResponse(data=[student_to_response(s) for s in students])


@router.get("/deleted", response_model=APIResponse[list[StudentResponse]])
def list_deleted_students(registrar: RegistrarDep) -> APIResponse[list[StudentResponse]]:
    """List soft-deleted students."""
    students = registrar.roster.list_deleted_students()
    return APIResponse(data=[student_to_response(s) for s in students])


@router.post(
    "",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(
    student: StudentCreate, registrar: RegistrarDep
) -> APIResponse[StudentResponse]:
    """Create a new student."""
    created = registrar.roster.add_student(student.student_id, student.name)
    return APIResponse(data=student_to_response(created))


@router.get("/{student_id}", response_model=APIResponse[StudentResponse])
def get_student(student_id: str, registrar: RegistrarDep) -> APIResponse[StudentResponse]:
    """Get an active student by ID."""
    return APIResponse(data=student_to_response(registrar.roster.get(student_id)))


@router.patch("/{student_id}", response_model=APIResponse[StudentResponse])
def update_student(
    student_id: str, student: StudentUpdate, registrar: RegistrarDep
) -> APIResponse[StudentResponse]:
    """Rename a student."""
    updated = registrar.roster.rename_student(student_id, student.name)
    return APIResponse(data=student_to_response(updated))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: str, registrar: RegistrarDep) -> None:
    """Soft-delete a student."""
    registrar.roster.remove_student(student_id)


@router.post("/{student_id}/restore", response_model=APIResponse[StudentResponse])
def restore_student(student_id: str, registrar: RegistrarDep) -> APIResponse[StudentResponse]:
    """Restore a soft-deleted student."""
    return APIResponse(data=student_to_response(registrar.roster.restore_student(student_id)))

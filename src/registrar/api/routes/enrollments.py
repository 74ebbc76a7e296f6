"""Enrollment and grade endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from registrar.api.dependencies import RegistrarDep
from registrar.api.models import (
    APIResponse,
    EnrollmentCreate,
    EnrollmentResponse,
    GradeUpdate,
    OutcomeResponse,
    OverallGradeResponse,
    enrollment_to_response,
    outcome_to_response,
)
from registrar.coordinator import EnrollmentOutcome, GradeOutcome

router = APIRouter(prefix="/students/{student_id}", tags=["enrollments"])

ENROLLMENT_STATUS = {
    EnrollmentOutcome.ENROLLED: status.HTTP_201_CREATED,
    EnrollmentOutcome.ALREADY_ENROLLED: status.HTTP_409_CONFLICT,
    EnrollmentOutcome.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    EnrollmentOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    EnrollmentOutcome.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GRADE_STATUS = {
    GradeOutcome.ASSIGNED: status.HTTP_200_OK,
    GradeOutcome.NOT_ENROLLED: status.HTTP_409_CONFLICT,
    GradeOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    GradeOutcome.INVALID_GRADE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    GradeOutcome.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _outcome_response(result: object, ok: bool, status_code: int) -> JSONResponse:
    body = outcome_to_response(result)
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[OutcomeResponse](
            data=body, error=None if ok else body.message
        ).model_dump(mode="json"),
    )


@router.get("/enrollments", response_model=APIResponse[list[EnrollmentResponse]])
def list_enrollments(
    student_id: str, registrar: RegistrarDep
) -> APIResponse[list[EnrollmentResponse]]:
    """List a student's enrollments with grades."""
    views = registrar.coordinator.list_enrollments(student_id)
    return APIResponse(data=[enrollment_to_response(v) for v in views])


@router.post("/enrollments", response_model=APIResponse[OutcomeResponse])
def enroll(
    student_id: str, enrollment: EnrollmentCreate, registrar: RegistrarDep
) -> JSONResponse:
    """Enroll a student in a course."""
    result = registrar.coordinator.enroll(student_id, enrollment.course_code)
    return _outcome_response(result, result.ok, ENROLLMENT_STATUS[result.outcome])


@router.put("/enrollments/{course_code}/grade", response_model=APIResponse[OutcomeResponse])
def assign_grade(
    student_id: str, course_code: str, grade: GradeUpdate, registrar: RegistrarDep
) -> JSONResponse:
    """Assign a grade for one of the student's enrollments."""
    result = registrar.coordinator.assign_grade(student_id, course_code, grade.grade)
    return _outcome_response(result, result.ok, GRADE_STATUS[result.outcome])


@router.get("/grade", response_model=APIResponse[OverallGradeResponse])
def get_overall_grade(
    student_id: str, registrar: RegistrarDep
) -> APIResponse[OverallGradeResponse]:
    """Unweighted average of a student's assigned grades."""
    overall = registrar.coordinator.student_overall_grade(student_id)
    return APIResponse(
        data=OverallGradeResponse(
            student_id=registrar.roster.get(student_id).student_id,
            overall_grade=overall,
        )
    )

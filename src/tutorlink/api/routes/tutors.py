"""Tutor endpoints for handling student link requests."""

from fastapi import APIRouter

from tutorlink.api.dependencies import PlatformDep, TutorDep
from tutorlink.api.models import APIResponse, StudentResponse, student_to_response

router = APIRouter(prefix="/tutors", tags=["tutors"])


@router.get("/requests", response_model=APIResponse[list[StudentResponse]])
def list_pending_students(
    tutor: TutorDep, platform: PlatformDep
) -> APIResponse[list[StudentResponse]]:
    """List students waiting for this tutor's approval."""
    students = platform.linkage.list_pending(tutor.subject)
    return APIResponse(data=[student_to_response(s) for s in students])


@router.post("/requests/{student_id}/accept", response_model=APIResponse[StudentResponse])
def accept_student(
    student_id: str, tutor: TutorDep, platform: PlatformDep
) -> APIResponse[StudentResponse]:
    """Accept a pending student."""
    student = platform.linkage.accept(student_id, tutor.subject)
    return APIResponse(data=student_to_response(student))


@router.post("/requests/{student_id}/decline", response_model=APIResponse[StudentResponse])
def decline_student(
    student_id: str, tutor: TutorDep, platform: PlatformDep
) -> APIResponse[StudentResponse]:
    """Decline a pending student."""
    student = platform.linkage.decline(student_id, tutor.subject)
    return APIResponse(data=student_to_response(student))


@router.get("/students", response_model=APIResponse[list[StudentResponse]])
def list_students(tutor: TutorDep, platform: PlatformDep) -> APIResponse[list[StudentResponse]]:
    """List this tutor's approved students."""
    students = platform.linkage.list_students(tutor.subject)
    return APIResponse(data=[student_to_response(s) for s in students])

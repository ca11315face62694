"""Student endpoints for joining courses."""

from fastapi import APIRouter, Query, status

from tutorlink.api.dependencies import PlatformDep, StudentDep
from tutorlink.api.models import (
    APIResponse,
    EnrollmentResponse,
    JoinCourseRequest,
    StudentCourseResponse,
    enrollment_to_response,
    student_course_to_response,
)
from tutorlink.store import EnrollmentStatus

router = APIRouter(prefix="/students", tags=["students"])


@router.post(
    "/me/enrollments",
    response_model=APIResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def join_course(
    body: JoinCourseRequest, student: StudentDep, platform: PlatformDep
) -> APIResponse[EnrollmentResponse]:
    """Request to join a course by its code."""
    enrollment = platform.enrollment.request_join(student.subject, body.course_code)
    return APIResponse(data=enrollment_to_response(enrollment))


@router.get("/me/enrollments", response_model=APIResponse[list[StudentCourseResponse]])
def list_my_enrollments(
    student: StudentDep,
    platform: PlatformDep,
    status_filter: EnrollmentStatus | None = Query(
        default=None, alias="status", description="Filter by enrollment status"
    ),
) -> APIResponse[list[StudentCourseResponse]]:
    """List this student's enrollments and their courses."""
    entries = platform.enrollment.list_for_student(student.subject, status=status_filter)
    return APIResponse(data=[student_course_to_response(e) for e in entries])

"""Course CRUD and enrollment approval endpoints for tutors."""

from fastapi import APIRouter, Query, status

from tutorlink.api.dependencies import PlatformDep, TutorDep
from tutorlink.api.models import (
    APIResponse,
    CourseCreate,
    CourseResponse,
    CourseSummaryResponse,
    CourseUpdate,
    EnrolledStudentResponse,
    EnrollmentResponse,
    course_summary_to_response,
    course_to_response,
    enrolled_student_to_response,
    enrollment_to_response,
)
from tutorlink.courses import CoursePatch, CourseProfile
from tutorlink.store import EnrollmentStatus

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseSummaryResponse]])
def list_courses(
    tutor: TutorDep, platform: PlatformDep
) -> APIResponse[list[CourseSummaryResponse]]:
    """List this tutor's courses with approved-student counts."""
    summaries = platform.courses.list_courses(tutor.subject)
    return APIResponse(data=[course_summary_to_response(s) for s in summaries])


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(
    body: CourseCreate, tutor: TutorDep, platform: PlatformDep
) -> APIResponse[CourseResponse]:
    """Create a course. A join code is generated unless one is supplied."""
    course = platform.courses.create_course(
        tutor.subject,
        CourseProfile(
            name=body.name,
            description=body.description,
            image_url=body.image_url,
            code=body.code,
        ),
    )
    return APIResponse(data=course_to_response(course))


@router.patch("/{course_id}", response_model=APIResponse[CourseResponse])
def update_course(
    course_id: str, body: CourseUpdate, tutor: TutorDep, platform: PlatformDep
) -> APIResponse[CourseResponse]:
    """Update a course (partial update)."""
    course = platform.courses.update_course(
        course_id,
        tutor.subject,
        CoursePatch(name=body.name, description=body.description, image_url=body.image_url),
    )
    return APIResponse(data=course_to_response(course))


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(course_id: str, tutor: TutorDep, platform: PlatformDep) -> None:
    """Delete a course and all of its enrollments."""
    platform.courses.delete_course(course_id, tutor.subject)


@router.get(
    "/{course_id}/enrollments",
    response_model=APIResponse[list[EnrolledStudentResponse]],
)
def list_course_enrollments(
    course_id: str,
    tutor: TutorDep,
    platform: PlatformDep,
    status_filter: EnrollmentStatus | None = Query(
        default=None, alias="status", description="Filter by enrollment status"
    ),
) -> APIResponse[list[EnrolledStudentResponse]]:
    """List a course's enrollments."""
    entries = platform.enrollment.list_for_course(course_id, tutor.subject, status=status_filter)
    return APIResponse(data=[enrolled_student_to_response(e) for e in entries])


@router.post(
    "/{course_id}/enrollments/{student_id}/approve",
    response_model=APIResponse[EnrollmentResponse],
)
def approve_enrollment(
    course_id: str, student_id: str, tutor: TutorDep, platform: PlatformDep
) -> APIResponse[EnrollmentResponse]:
    """Approve a pending enrollment."""
    enrollment = platform.enrollment.approve(course_id, student_id, tutor.subject)
    return APIResponse(data=enrollment_to_response(enrollment))


@router.post(
    "/{course_id}/enrollments/{student_id}/reject",
    response_model=APIResponse[EnrollmentResponse],
)
def reject_enrollment(
    course_id: str, student_id: str, tutor: TutorDep, platform: PlatformDep
) -> APIResponse[EnrollmentResponse]:
    """Reject a pending enrollment."""
    enrollment = platform.enrollment.reject(course_id, student_id, tutor.subject)
    return APIResponse(data=enrollment_to_response(enrollment))

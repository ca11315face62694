"""Courses - tutor-owned courses and the enrollment approval workflow."""

from tutorlink.courses.enrollment import EnrollmentWorkflow
from tutorlink.courses.exceptions import (
    AlreadyEnrolledError,
    CourseCodeTakenError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
)
from tutorlink.courses.models import (
    CoursePatch,
    CourseProfile,
    CourseSummary,
    EnrolledStudent,
    StudentCourse,
)
from tutorlink.courses.registry import CourseRegistry

__all__ = [
    "AlreadyEnrolledError",
    "CourseCodeTakenError",
    "CourseNotFoundError",
    "CoursePatch",
    "CourseProfile",
    "CourseRegistry",
    "CourseSummary",
    "EnrolledStudent",
    "EnrollmentNotFoundError",
    "EnrollmentWorkflow",
    "StudentCourse",
]

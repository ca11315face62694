"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Account models


class TutorRegister(BaseModel):
    """Request model for registering a tutor."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    subject: str | None = Field(default=None, max_length=100)
    bio: str | None = None


class StudentRegister(BaseModel):
    """Request model for registering a student under a tutor code."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    grade_level: str | None = Field(default=None, max_length=50)
    tutor_code: str = Field(..., min_length=1, max_length=16)


class LoginRequest(BaseModel):
    """Request model for tutor and student login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class TutorResponse(BaseModel):
    """Response model for a tutor."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    email: str
    first_name: str
    last_name: str
    subject: str | None
    bio: str | None
    created_at: datetime


def tutor_to_response(tutor: Any) -> TutorResponse:
    """Convert a Tutor model to TutorResponse."""
    return TutorResponse.model_validate(tutor)


class StudentResponse(BaseModel):
    """Response model for a student."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    grade_level: str | None
    tutor_id: str | None
    linkage_status: str
    created_at: datetime
    updated_at: datetime


def student_to_response(student: Any) -> StudentResponse:
    """Convert a Student model to StudentResponse."""
    return StudentResponse.model_validate(student)


class LoginResponse(BaseModel):
    """Response model for a successful login."""

    token: str
    token_type: str = "bearer"
    role: str
    account: TutorResponse | StudentResponse


# Course models


class CourseCreate(BaseModel):
    """Request model for creating a course. Omit code to have one generated."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None
    code: str | None = Field(default=None, min_length=1, max_length=16)


class CourseUpdate(BaseModel):
    """Request model for updating a course (partial update)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None


class CourseResponse(BaseModel):
    """Response model for a course."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    tutor_id: str
    name: str
    description: str | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course model to CourseResponse."""
    return CourseResponse.model_validate(course)


class CourseSummaryResponse(CourseResponse):
    """Response model for a course with its approved-student count."""

    student_count: int


def course_summary_to_response(summary: Any) -> CourseSummaryResponse:
    """Convert a CourseSummary to CourseSummaryResponse."""
    base = course_to_response(summary.course)
    return CourseSummaryResponse(**base.model_dump(), student_count=summary.student_count)


# Enrollment models


class JoinCourseRequest(BaseModel):
    """Request model for joining a course by code."""

    course_code: str = Field(..., min_length=1, max_length=16)


class EnrollmentResponse(BaseModel):
    """Response model for an enrollment."""

    model_config = ConfigDict(from_attributes=True)

    student_id: str
    course_id: str
    status: str
    created_at: datetime
    updated_at: datetime


def enrollment_to_response(enrollment: Any) -> EnrollmentResponse:
    """Convert an Enrollment model to EnrollmentResponse."""
    return EnrollmentResponse.model_validate(enrollment)


class EnrolledStudentResponse(EnrollmentResponse):
    """Response model for an enrollment as listed for a course."""

    student: StudentResponse


def enrolled_student_to_response(entry: Any) -> EnrolledStudentResponse:
    """Convert an EnrolledStudent to EnrolledStudentResponse."""
    base = enrollment_to_response(entry.enrollment)
    return EnrolledStudentResponse(**base.model_dump(), student=student_to_response(entry.student))


class StudentCourseResponse(EnrollmentResponse):
    """Response model for an enrollment as listed for a student."""

    course: CourseResponse


def student_course_to_response(entry: Any) -> StudentCourseResponse:
    """Convert a StudentCourse to StudentCourseResponse."""
    base = enrollment_to_response(entry.enrollment)
    return StudentCourseResponse(**base.model_dump(), course=course_to_response(entry.course))

"""Data models for the courses module."""

from __future__ import annotations

from dataclasses import dataclass

from tutorlink.store import Course, Enrollment, Student


@dataclass
class CourseProfile:
    """Fields a tutor supplies when creating a course.

    Attributes:
        name: Course name.
        description: Optional description.
        image_url: Optional http(s) or base64 image data URL.
        code: Optional client-chosen join code. Generated when omitted.
    """

    name: str
    description: str | None = None
    image_url: str | None = None
    code: str | None = None


@dataclass
class CoursePatch:
    """Partial course update. None means "leave unchanged"."""

    name: str | None = None
    description: str | None = None
    image_url: str | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.description is None and self.image_url is None


@dataclass
class CourseSummary:
    """A course with its number of approved students."""

    course: Course
    student_count: int


@dataclass
class EnrolledStudent:
    """An enrollment row joined with its student, as seen by the tutor."""

    enrollment: Enrollment
    student: Student


@dataclass
class StudentCourse:
    """An enrollment row joined with its course, as seen by the student."""

    enrollment: Enrollment
    course: Course

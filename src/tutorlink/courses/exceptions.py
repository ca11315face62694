"""Exceptions for the courses module."""

from tutorlink.exceptions import ConflictError, NotFoundError


class CourseNotFoundError(NotFoundError):
    """Course does not exist, or is not owned by the acting tutor."""


class CourseCodeTakenError(ConflictError):
    """A client-supplied course code is already in use."""


class AlreadyEnrolledError(ConflictError):
    """An enrollment row already exists for this (student, course) pair."""


class EnrollmentNotFoundError(NotFoundError):
    """No pending enrollment for this pair in a course the tutor owns."""

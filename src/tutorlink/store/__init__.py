"""Store - SQLAlchemy models, database handle and status transitions."""

from tutorlink.store.database import Database, is_unique_violation
from tutorlink.store.models import (
    COURSE_CODE_LENGTH,
    Base,
    Course,
    Enrollment,
    EnrollmentStatus,
    LinkageStatus,
    Student,
    Tutor,
)
from tutorlink.store.transitions import (
    EnrollmentTransition,
    LinkageTransition,
    apply_transition,
)

__all__ = [
    "COURSE_CODE_LENGTH",
    "Base",
    "Course",
    "Database",
    "Enrollment",
    "EnrollmentStatus",
    "EnrollmentTransition",
    "LinkageStatus",
    "LinkageTransition",
    "Student",
    "Tutor",
    "apply_transition",
    "is_unique_violation",
]

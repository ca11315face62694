"""SQLAlchemy models for the TutorLink store."""

from __future__ import annotations

import uuid
from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    DateTime,
    ForeignKey,
    String,
    Text,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)

COURSE_CODE_LENGTH = 7


class LinkageStatus(StrEnum):
    """Approval state of a student's link to their tutor."""

    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"

    @property
    def is_terminal(self) -> bool:
        return self is not LinkageStatus.PENDING


class EnrollmentStatus(StrEnum):
    """Approval state of a student's enrollment in a course."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not EnrollmentStatus.PENDING


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Tutor(Base):
    """Tutor model - a tutor account and its shareable code."""

    __tablename__ = "tutors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __init__(
        self,
        code: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        id: str | None = None,
        subject: str | None = None,
        bio: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.code = code
        self.email = email
        self.password_hash = password_hash
        self.first_name = first_name
        self.last_name = last_name
        self.subject = subject
        self.bio = bio

    def __repr__(self) -> str:
        return f"<Tutor(id={self.id!r}, code={self.code!r})>"


class Student(Base):
    """Student model - a student account linked to at most one tutor."""

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    grade_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Weak reference: deleting the tutor clears it, the student survives.
    tutor_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("tutors.id", ondelete="SET NULL"), nullable=True, index=True
    )
    linkage_status: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __init__(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        tutor_id: str,
        id: str | None = None,
        grade_level: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.email = email
        self.password_hash = password_hash
        self.first_name = first_name
        self.last_name = last_name
        self.grade_level = grade_level
        self.tutor_id = tutor_id
        self.linkage_status = LinkageStatus.PENDING.value

    @property
    def status(self) -> LinkageStatus:
        """Get linkage_status as LinkageStatus enum."""
        return LinkageStatus(self.linkage_status)

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id!r}, tutor_id={self.tutor_id!r}, "
            f"linkage_status={self.linkage_status!r})>"
        )


class Course(Base):
    """Course model - owned by a tutor; its id doubles as the join code."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(COURSE_CODE_LENGTH), primary_key=True)
    tutor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __init__(
        self,
        id: str,
        tutor_id: str,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id
        self.tutor_id = tutor_id
        self.name = name
        self.description = description
        self.image_url = image_url

    @property
    def code(self) -> str:
        """The shareable join code (same as id)."""
        return self.id

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, tutor_id={self.tutor_id!r}, name={self.name!r})>"


class Enrollment(Base):
    """Enrollment model - one row per (student, course) pair."""

    __tablename__ = "enrollments"

    student_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("students.id", ondelete="CASCADE"), primary_key=True
    )
    course_id: Mapped[str] = mapped_column(
        String(COURSE_CODE_LENGTH),
        ForeignKey("courses.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __init__(self, student_id: str, course_id: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_id = course_id
        self.status = EnrollmentStatus.PENDING.value

    @property
    def enrollment_status(self) -> EnrollmentStatus:
        """Get status as EnrollmentStatus enum."""
        return EnrollmentStatus(self.status)

    def __repr__(self) -> str:
        return (
            f"<Enrollment(student_id={self.student_id!r}, course_id={self.course_id!r}, "
            f"status={self.status!r})>"
        )

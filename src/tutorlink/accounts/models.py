"""Data models for the accounts module."""

from __future__ import annotations

from dataclasses import dataclass

from tutorlink.auth import Role
from tutorlink.store import Student, Tutor


@dataclass
class TutorProfile:
    """Fields a tutor supplies at registration."""

    email: str
    password: str
    first_name: str
    last_name: str
    subject: str | None = None
    bio: str | None = None


@dataclass
class StudentProfile:
    """Fields a student supplies at registration."""

    email: str
    password: str
    first_name: str
    last_name: str
    grade_level: str | None = None


@dataclass
class LoginResult:
    """A session token and the account it was issued for.

    Attributes:
        token: Session token from the credential service.
        role: Role the token carries.
        account: The Tutor or Student row.
    """

    token: str
    role: Role
    account: Tutor | Student

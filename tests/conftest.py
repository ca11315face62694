"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tutorlink.accounts import StudentProfile, TutorProfile
from tutorlink.auth import BcryptJWTCredentials
from tutorlink.platform import TutorPlatform
from tutorlink.store import Database, Student, Tutor

TEST_JWT_SECRET = "test-secret-that-is-at-least-32-characters-long"
TEST_PASSWORD = "secret123"


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def db() -> Iterator[Database]:
    """Create an in-memory database with tables."""
    database = Database(":memory:")
    database.create_tables()
    yield database
    database.close()


@pytest.fixture
def credentials() -> BcryptJWTCredentials:
    """Credential service with the cheapest bcrypt cost."""
    return BcryptJWTCredentials(secret=TEST_JWT_SECRET, rounds=4)


@pytest.fixture
def platform(db: Database, credentials: BcryptJWTCredentials) -> TutorPlatform:
    """All core components over the in-memory database."""
    return TutorPlatform(db, credentials)


def tutor_profile(email: str = "tutor@example.com", **overrides: str) -> TutorProfile:
    """Build a valid TutorProfile."""
    fields = {
        "email": email,
        "password": TEST_PASSWORD,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "subject": "Mathematics",
    }
    fields.update(overrides)
    return TutorProfile(**fields)


def student_profile(email: str = "student@example.com", **overrides: str) -> StudentProfile:
    """Build a valid StudentProfile."""
    fields = {
        "email": email,
        "password": TEST_PASSWORD,
        "first_name": "Sam",
        "last_name": "Student",
        "grade_level": "10",
    }
    fields.update(overrides)
    return StudentProfile(**fields)


@pytest.fixture
def tutor(platform: TutorPlatform) -> Tutor:
    """A registered tutor."""
    return platform.accounts.register_tutor(tutor_profile())


@pytest.fixture
def pending_student(platform: TutorPlatform, tutor: Tutor) -> Student:
    """A student registered under the tutor fixture, still pending."""
    return platform.accounts.register_student(student_profile(), tutor.code)


@pytest.fixture
def approved_student(platform: TutorPlatform, tutor: Tutor, pending_student: Student) -> Student:
    """The pending student after the tutor accepted them."""
    return platform.linkage.accept(pending_student.id, tutor.id)


@pytest.fixture
def make_tutor(platform: TutorPlatform):
    """Factory registering tutors with distinct emails."""

    def _make(email: str = "other.tutor@example.com", **overrides: str) -> Tutor:
        return platform.accounts.register_tutor(tutor_profile(email, **overrides))

    return _make


@pytest.fixture
def make_student(platform: TutorPlatform):
    """Factory registering students under a tutor, optionally accepted."""

    def _make(
        tutor: Tutor,
        email: str = "other.student@example.com",
        approve: bool = False,
        **overrides: str,
    ) -> Student:
        student = platform.accounts.register_student(
            student_profile(email, **overrides), tutor.code
        )
        if approve:
            student = platform.linkage.accept(student.id, tutor.id)
        return student

    return _make

"""End-to-end scenarios and invariants across the core components."""

import tempfile
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from tutorlink.accounts import (
    RequestNotFoundError,
    StudentProfile,
    TutorProfile,
    UnknownTutorCodeError,
)
from tutorlink.auth import BcryptJWTCredentials
from tutorlink.courses import (
    AlreadyEnrolledError,
    CourseProfile,
    EnrollmentNotFoundError,
)
from tutorlink.exceptions import TutorLinkError
from tutorlink.platform import TutorPlatform
from tutorlink.store import (
    Database,
    Enrollment,
    EnrollmentStatus,
    LinkageStatus,
    Student,
)


@pytest.fixture
def file_platform():
    """Platform over a temporary database file, for multi-threaded tests."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = f.name
    db = Database(path)
    db.create_tables()
    credentials = BcryptJWTCredentials(
        secret="scenario-secret-with-enough-length-000", rounds=4
    )
    yield TutorPlatform(db, credentials)
    db.close()
    Path(path).unlink(missing_ok=True)
    Path(f"{path}-wal").unlink(missing_ok=True)
    Path(f"{path}-shm").unlink(missing_ok=True)


def _tutor(platform: TutorPlatform, email: str = "tutor@example.com"):
    return platform.accounts.register_tutor(
        TutorProfile(email=email, password="secret123", first_name="Ada", last_name="L")
    )


def _student(platform: TutorPlatform, code: str, email: str = "student@example.com"):
    return platform.accounts.register_student(
        StudentProfile(email=email, password="secret123", first_name="Sam", last_name="S"),
        code,
    )


def _student_count(db: Database) -> int:
    session = db.get_session()
    try:
        return session.query(Student).count()
    finally:
        session.close()


def _race(calls: list[Callable[[], object]]) -> tuple[list[object], list[Exception]]:
    """Run calls concurrently; return successes and TutorLinkErrors."""
    successes: list[object] = []
    failures: list[Exception] = []
    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(call) for call in calls]
        for future in futures:
            try:
                successes.append(future.result())
            except TutorLinkError as e:
                failures.append(e)
    return successes, failures


@pytest.mark.integration
class TestScenarios:
    """The three reference scenarios."""

    def test_register_link_and_decline(self, platform: TutorPlatform) -> None:
        """Scenario A: a declined student cannot be accepted afterwards."""
        tutor = _tutor(platform)
        student = _student(platform, tutor.code)
        assert student.status is LinkageStatus.PENDING
        assert student.tutor_id == tutor.id

        declined = platform.linkage.decline(student.id, tutor.id)
        assert declined.status is LinkageStatus.DECLINED

        with pytest.raises(RequestNotFoundError):
            platform.linkage.accept(student.id, tutor.id)
        assert platform.accounts.get_student(student.id).status is LinkageStatus.DECLINED

    def test_join_approve_then_reject(self, platform: TutorPlatform) -> None:
        """Scenario B: duplicate joins and late rejections are refused."""
        tutor = _tutor(platform)
        student = _student(platform, tutor.code)
        platform.linkage.accept(student.id, tutor.id)
        course = platform.courses.create_course(tutor.id, CourseProfile(name="Algebra"))

        enrollment = platform.enrollment.request_join(student.id, course.code)
        assert enrollment.enrollment_status is EnrollmentStatus.PENDING
        with pytest.raises(AlreadyEnrolledError):
            platform.enrollment.request_join(student.id, course.code)

        approved = platform.enrollment.approve(course.id, student.id, tutor.id)
        assert approved.enrollment_status is EnrollmentStatus.APPROVED
        with pytest.raises(EnrollmentNotFoundError):
            platform.enrollment.reject(course.id, student.id, tutor.id)

        [entry] = platform.enrollment.list_for_course(course.id, tutor.id)
        assert entry.enrollment.enrollment_status is EnrollmentStatus.APPROVED

    def test_unknown_tutor_code_creates_nothing(self, platform: TutorPlatform) -> None:
        """Scenario C: a bad tutor code leaves the directory unchanged."""
        _tutor(platform)
        before = _student_count(platform.db)

        with pytest.raises(UnknownTutorCodeError):
            _student(platform, "TUTNOPE!")

        assert _student_count(platform.db) == before


@pytest.mark.integration
class TestConcurrency:
    """Races settle on store constraints; exactly one caller wins."""

    def test_concurrent_accept_and_decline(self, file_platform: TutorPlatform) -> None:
        tutor = _tutor(file_platform)
        student = _student(file_platform, tutor.code)

        successes, failures = _race(
            [
                lambda: file_platform.linkage.accept(student.id, tutor.id),
                lambda: file_platform.linkage.decline(student.id, tutor.id),
                lambda: file_platform.linkage.accept(student.id, tutor.id),
            ]
        )

        assert len(successes) == 1
        assert len(failures) == 2
        assert all(isinstance(e, RequestNotFoundError) for e in failures)
        final = file_platform.accounts.get_student(student.id).status
        assert final is successes[0].status

    def test_concurrent_join_requests(self, file_platform: TutorPlatform) -> None:
        tutor = _tutor(file_platform)
        student = _student(file_platform, tutor.code)
        file_platform.linkage.accept(student.id, tutor.id)
        course = file_platform.courses.create_course(tutor.id, CourseProfile(name="Algebra"))

        successes, failures = _race(
            [lambda: file_platform.enrollment.request_join(student.id, course.code)] * 4
        )

        assert len(successes) == 1
        assert all(isinstance(e, AlreadyEnrolledError) for e in failures)
        session = file_platform.db.get_session()
        try:
            assert session.query(Enrollment).count() == 1
        finally:
            session.close()

    def test_concurrent_tutor_registrations_get_distinct_codes(
        self, file_platform: TutorPlatform
    ) -> None:
        successes, failures = _race(
            [
                (lambda i=i: _tutor(file_platform, f"tutor{i}@example.com"))
                for i in range(6)
            ]
        )

        assert failures == []
        assert len({t.code for t in successes}) == 6

"""Unit tests for EnrollmentWorkflow."""

import pytest

from tutorlink.courses import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    CourseProfile,
    EnrollmentNotFoundError,
)
from tutorlink.exceptions import AccountNotApprovedError, NotFoundError
from tutorlink.platform import TutorPlatform
from tutorlink.store import Course, EnrollmentStatus, Student, Tutor


@pytest.fixture
def course(platform: TutorPlatform, tutor: Tutor) -> Course:
    """A course owned by the tutor fixture."""
    return platform.courses.create_course(tutor.id, CourseProfile(name="Algebra"))


@pytest.mark.unit
class TestRequestJoin:
    """Tests for request_join."""

    def test_creates_pending_enrollment(
        self, platform: TutorPlatform, course: Course, approved_student: Student
    ) -> None:
        enrollment = platform.enrollment.request_join(approved_student.id, course.code.lower())
        assert enrollment.student_id == approved_student.id
        assert enrollment.course_id == course.id
        assert enrollment.enrollment_status is EnrollmentStatus.PENDING

    def test_unknown_course(self, platform: TutorPlatform, approved_student: Student) -> None:
        with pytest.raises(CourseNotFoundError):
            platform.enrollment.request_join(approved_student.id, "NOPE123")

    def test_unknown_student(self, platform: TutorPlatform, course: Course) -> None:
        with pytest.raises(NotFoundError):
            platform.enrollment.request_join("missing", course.code)

    def test_pending_student_refused(
        self, platform: TutorPlatform, course: Course, pending_student: Student
    ) -> None:
        with pytest.raises(AccountNotApprovedError):
            platform.enrollment.request_join(pending_student.id, course.code)

    def test_second_request_refused_whatever_status(
        self, platform: TutorPlatform, tutor: Tutor, course: Course, approved_student: Student
    ) -> None:
        platform.enrollment.request_join(approved_student.id, course.code)
        with pytest.raises(AlreadyEnrolledError):
            platform.enrollment.request_join(approved_student.id, course.code)

        platform.enrollment.reject(course.id, approved_student.id, tutor.id)
        with pytest.raises(AlreadyEnrolledError):
            platform.enrollment.request_join(approved_student.id, course.code)

    def test_course_of_another_tutor_is_joinable(
        self, platform: TutorPlatform, approved_student: Student, make_tutor
    ) -> None:
        """Join codes are not restricted to the student's own tutor."""
        other_course = platform.courses.create_course(
            make_tutor().id, CourseProfile(name="Biology")
        )
        enrollment = platform.enrollment.request_join(approved_student.id, other_course.code)
        assert enrollment.course_id == other_course.id


@pytest.mark.unit
class TestApproveReject:
    """Tests for approve and reject."""

    @pytest.fixture
    def requested(
        self, platform: TutorPlatform, course: Course, approved_student: Student
    ) -> Student:
        platform.enrollment.request_join(approved_student.id, course.code)
        return approved_student

    def test_approve(
        self, platform: TutorPlatform, tutor: Tutor, course: Course, requested: Student
    ) -> None:
        enrollment = platform.enrollment.approve(course.id, requested.id, tutor.id)
        assert enrollment.enrollment_status is EnrollmentStatus.APPROVED

    def test_reject(
        self, platform: TutorPlatform, tutor: Tutor, course: Course, requested: Student
    ) -> None:
        enrollment = platform.enrollment.reject(course.id, requested.id, tutor.id)
        assert enrollment.enrollment_status is EnrollmentStatus.REJECTED

    def test_terminal_states_stick(
        self, platform: TutorPlatform, tutor: Tutor, course: Course, requested: Student
    ) -> None:
        platform.enrollment.approve(course.id, requested.id, tutor.id)
        with pytest.raises(EnrollmentNotFoundError):
            platform.enrollment.reject(course.id, requested.id, tutor.id)
        with pytest.raises(EnrollmentNotFoundError):
            platform.enrollment.approve(course.id, requested.id, tutor.id)

        [entry] = platform.enrollment.list_for_student(requested.id)
        assert entry.enrollment.enrollment_status is EnrollmentStatus.APPROVED

    def test_non_owner_cannot_decide(
        self, platform: TutorPlatform, course: Course, requested: Student, make_tutor
    ) -> None:
        other = make_tutor()
        with pytest.raises(EnrollmentNotFoundError):
            platform.enrollment.approve(course.id, requested.id, other.id)

        [entry] = platform.enrollment.list_for_student(requested.id)
        assert entry.enrollment.enrollment_status is EnrollmentStatus.PENDING

    def test_no_request(
        self, platform: TutorPlatform, tutor: Tutor, course: Course, approved_student: Student
    ) -> None:
        with pytest.raises(EnrollmentNotFoundError):
            platform.enrollment.approve(course.id, approved_student.id, tutor.id)


@pytest.mark.unit
class TestListings:
    """Tests for list_for_course and list_for_student."""

    def test_list_for_course_with_filter(
        self, platform: TutorPlatform, tutor: Tutor, course: Course, make_student
    ) -> None:
        kept = make_student(tutor, "kept@example.com", approve=True)
        dropped = make_student(tutor, "dropped@example.com", approve=True)
        platform.enrollment.request_join(kept.id, course.code)
        platform.enrollment.request_join(dropped.id, course.code)
        platform.enrollment.approve(course.id, kept.id, tutor.id)
        platform.enrollment.reject(course.id, dropped.id, tutor.id)

        everyone = platform.enrollment.list_for_course(course.id, tutor.id)
        assert {e.student.id for e in everyone} == {kept.id, dropped.id}

        approved = platform.enrollment.list_for_course(
            course.id, tutor.id, status=EnrollmentStatus.APPROVED
        )
        assert [e.student.id for e in approved] == [kept.id]
        assert approved[0].enrollment.status == "approved"

    def test_list_for_course_requires_owner(
        self, platform: TutorPlatform, course: Course, make_tutor
    ) -> None:
        with pytest.raises(CourseNotFoundError):
            platform.enrollment.list_for_course(course.id, make_tutor().id)

    def test_list_for_student(
        self,
        platform: TutorPlatform,
        tutor: Tutor,
        course: Course,
        approved_student: Student,
    ) -> None:
        biology = platform.courses.create_course(tutor.id, CourseProfile(name="Biology"))
        platform.enrollment.request_join(approved_student.id, course.code)
        platform.enrollment.request_join(approved_student.id, biology.code)
        platform.enrollment.approve(biology.id, approved_student.id, tutor.id)

        entries = platform.enrollment.list_for_student(approved_student.id)
        assert {e.course.name for e in entries} == {"Algebra", "Biology"}

        pending = platform.enrollment.list_for_student(
            approved_student.id, status=EnrollmentStatus.PENDING
        )
        assert [e.course.name for e in pending] == ["Algebra"]

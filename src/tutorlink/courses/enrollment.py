"""EnrollmentWorkflow - course join requests and their approval."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tutorlink.codes import canonicalize
from tutorlink.courses.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    EnrollmentNotFoundError,
)
from tutorlink.courses.models import EnrolledStudent, StudentCourse
from tutorlink.exceptions import AccountNotApprovedError, NotFoundError
from tutorlink.store import (
    Course,
    Enrollment,
    EnrollmentStatus,
    EnrollmentTransition,
    LinkageStatus,
    Student,
    apply_transition,
    is_unique_violation,
)

if TYPE_CHECKING:
    from tutorlink.store import Database

logger = logging.getLogger(__name__)


class EnrollmentWorkflow:
    """Drives Enrollment.status from PENDING to APPROVED or REJECTED.

    At most one row exists per (student, course); a second join request is
    refused whatever the first one's status. Only the course's owning tutor
    may approve or reject.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def request_join(self, student_id: str, course_code: str) -> Enrollment:
        """Ask to join the course with the given code.

        The row is inserted directly; the (student_id, course_id) primary key
        rejects duplicates, so concurrent requests cannot both succeed.

        Args:
            student_id: ID of an approved student.
            course_code: The course's join code, any case.

        Returns:
            The created Enrollment in PENDING state.

        Raises:
            NotFoundError: If the student doesn't exist.
            AccountNotApprovedError: If the student is not approved by their tutor.
            CourseNotFoundError: If no course has the code.
            AlreadyEnrolledError: If an enrollment for the pair already exists.
        """
        code = canonicalize(course_code)
        session = self._db.get_session()
        try:
            student = session.get(Student, student_id)
            if student is None:
                raise NotFoundError(f"Student with id '{student_id}' not found")
            if student.status is not LinkageStatus.APPROVED:
                raise AccountNotApprovedError(
                    "Your registration must be approved before joining courses"
                )
            if session.get(Course, code) is None:
                raise CourseNotFoundError(f"No course with code '{code}'")

            enrollment = Enrollment(student_id=student_id, course_id=code)
            session.add(enrollment)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if is_unique_violation(e, "enrollments.student_id", "enrollments.course_id"):
                    raise AlreadyEnrolledError(
                        f"Student '{student_id}' already has a request for course '{code}'"
                    ) from e
                if "FOREIGN KEY constraint failed" in str(e.orig):
                    raise CourseNotFoundError(f"No course with code '{code}'") from e
                raise
            session.refresh(enrollment)
            logger.info("Student %s requested to join course %s", student_id, code)
            return enrollment
        finally:
            session.close()

    def approve(self, course_id: str, student_id: str, tutor_id: str) -> Enrollment:
        """Approve a pending enrollment in a course the tutor owns.

        Raises:
            EnrollmentNotFoundError: If there is no pending enrollment for the
                pair in a course owned by tutor_id.
        """
        return self._apply(EnrollmentTransition.APPROVE, course_id, student_id, tutor_id)

    def reject(self, course_id: str, student_id: str, tutor_id: str) -> Enrollment:
        """Reject a pending enrollment. See approve() for errors."""
        return self._apply(EnrollmentTransition.REJECT, course_id, student_id, tutor_id)

    def list_for_course(
        self,
        course_id: str,
        tutor_id: str,
        status: EnrollmentStatus | None = None,
    ) -> list[EnrolledStudent]:
        """List a course's enrollments with their students, oldest first.

        Args:
            course_id: The course's ID.
            tutor_id: ID of the tutor acting; must own the course.
            status: Filter by enrollment status (optional).

        Raises:
            CourseNotFoundError: If the course doesn't exist or isn't owned by tutor_id.
        """
        code = canonicalize(course_id)
        session = self._db.get_session()
        try:
            course = session.get(Course, code)
            if course is None or course.tutor_id != tutor_id:
                raise CourseNotFoundError(
                    "Course not found or you do not have permission to view it"
                )

            stmt = (
                select(Enrollment, Student)
                .join(Student, Student.id == Enrollment.student_id)
                .where(Enrollment.course_id == code)
            )
            if status is not None:
                stmt = stmt.where(Enrollment.status == status.value)
            stmt = stmt.order_by(Enrollment.created_at, Student.last_name)

            return [
                EnrolledStudent(enrollment=enrollment, student=student)
                for enrollment, student in session.execute(stmt).all()
            ]
        finally:
            session.close()

    def list_for_student(
        self,
        student_id: str,
        status: EnrollmentStatus | None = None,
    ) -> list[StudentCourse]:
        """List a student's enrollments with their courses, newest first."""
        session = self._db.get_session()
        try:
            stmt = (
                select(Enrollment, Course)
                .join(Course, Course.id == Enrollment.course_id)
                .where(Enrollment.student_id == student_id)
            )
            if status is not None:
                stmt = stmt.where(Enrollment.status == status.value)
            stmt = stmt.order_by(Enrollment.created_at.desc(), Course.name)

            return [
                StudentCourse(enrollment=enrollment, course=course)
                for enrollment, course in session.execute(stmt).all()
            ]
        finally:
            session.close()

    def _apply(
        self,
        transition: EnrollmentTransition,
        course_id: str,
        student_id: str,
        tutor_id: str,
    ) -> Enrollment:
        code = canonicalize(course_id)
        owned_courses = select(Course.id).where(Course.tutor_id == tutor_id)
        session = self._db.get_session()
        try:
            updated = apply_transition(
                session,
                Enrollment.status,
                transition,
                Enrollment.student_id == student_id,
                Enrollment.course_id == code,
                Enrollment.course_id.in_(owned_courses),
            )
            if updated == 0:
                session.rollback()
                logger.info(
                    "Tutor %s cannot %s student %s in course %s: no pending enrollment",
                    tutor_id,
                    transition.name.lower(),
                    student_id,
                    code,
                )
                raise EnrollmentNotFoundError("Enrollment request not found or already processed")

            session.commit()
            enrollment = session.get(Enrollment, (student_id, code))
            if enrollment is None:
                raise EnrollmentNotFoundError("Enrollment request not found or already processed")
            logger.info(
                "Enrollment of student %s in course %s is now %s",
                student_id,
                code,
                enrollment.status,
            )
            return enrollment
        finally:
            session.close()

"""CourseRegistry - tutor-owned courses and their join codes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError

from tutorlink.codes import CodeNamespace, canonicalize
from tutorlink.courses.exceptions import CourseCodeTakenError, CourseNotFoundError
from tutorlink.courses.models import CoursePatch, CourseProfile, CourseSummary
from tutorlink.exceptions import NotFoundError, ValidationError
from tutorlink.store import Course, Enrollment, EnrollmentStatus, Tutor, is_unique_violation
from tutorlink.validation import check_image_url, optional_text, require_text

if TYPE_CHECKING:
    from tutorlink.codes import CodeGenerator
    from tutorlink.store import Database

logger = logging.getLogger(__name__)

_NOT_OWNED = "Course not found or you do not have permission to change it"


class CourseRegistry:
    """Creates, updates and deletes courses on behalf of their owning tutor."""

    def __init__(self, db: Database, codes: CodeGenerator) -> None:
        """Initialize the registry.

        Args:
            db: Database handle.
            codes: Generator used to allocate course codes.
        """
        self._db = db
        self._codes = codes

    def create_course(self, tutor_id: str, profile: CourseProfile) -> Course:
        """Create a course owned by tutor_id.

        The join code is generated unless the profile carries one. A supplied
        code must be well formed and unused; it is never replaced silently.

        Args:
            tutor_id: ID of the owning tutor.
            profile: Course fields.

        Returns:
            The created Course.

        Raises:
            ValidationError: If a field or the supplied code is malformed.
            NotFoundError: If the tutor doesn't exist.
            CourseCodeTakenError: If the supplied code is already in use.
            CodeSpaceExhaustedError: If no free code could be reserved.
        """
        name = require_text(profile.name, "Course name")
        description = optional_text(profile.description)
        image_url = check_image_url(profile.image_url) if profile.image_url else None

        session = self._db.get_session()
        try:
            if session.get(Tutor, tutor_id) is None:
                raise NotFoundError(f"Tutor with id '{tutor_id}' not found")
        finally:
            session.close()

        def insert(code: str) -> Course:
            return self._insert(code, tutor_id, name, description, image_url)

        if profile.code is None:
            course = self._codes.reserve(CodeNamespace.COURSE, insert)
        else:
            code = canonicalize(profile.code)
            if not self._codes.is_well_formed(CodeNamespace.COURSE, code):
                raise ValidationError(f"Course code '{profile.code}' is not a valid code")
            try:
                course = insert(code)
            except IntegrityError as e:
                if is_unique_violation(e, "courses.id"):
                    raise CourseCodeTakenError(f"Course code '{code}' is already in use") from e
                raise

        logger.info("Tutor %s created course %s", tutor_id, course.id)
        return course

    def get_course_by_code(self, code: str) -> Course:
        """Resolve a course by its join code, case-insensitively.

        Raises:
            CourseNotFoundError: If no course has the code.
        """
        canonical = canonicalize(code)
        session = self._db.get_session()
        try:
            course = session.get(Course, canonical)
            if course is None:
                raise CourseNotFoundError(f"No course with code '{canonical}'")
            return course
        finally:
            session.close()

    def list_courses(self, tutor_id: str) -> list[CourseSummary]:
        """List a tutor's courses with their approved-student counts."""
        session = self._db.get_session()
        try:
            stmt = (
                select(Course, func.count(Enrollment.student_id))
                .outerjoin(
                    Enrollment,
                    and_(
                        Enrollment.course_id == Course.id,
                        Enrollment.status == EnrollmentStatus.APPROVED.value,
                    ),
                )
                .where(Course.tutor_id == tutor_id)
                .group_by(Course.id)
                .order_by(Course.name)
            )
            return [
                CourseSummary(course=course, student_count=count)
                for course, count in session.execute(stmt).all()
            ]
        finally:
            session.close()

    def update_course(self, course_id: str, tutor_id: str, patch: CoursePatch) -> Course:
        """Update course fields. Only provided fields are updated.

        Args:
            course_id: The course's ID (its join code).
            tutor_id: ID of the tutor acting.
            patch: Fields to change.

        Returns:
            The updated Course.

        Raises:
            ValidationError: If the patch is empty or a field is malformed.
            CourseNotFoundError: If the course doesn't exist or isn't owned by tutor_id.
        """
        if patch.is_empty():
            raise ValidationError("No fields to update")
        name = require_text(patch.name, "Course name") if patch.name is not None else None
        image_url = check_image_url(patch.image_url) if patch.image_url is not None else None

        session = self._db.get_session()
        try:
            course = session.get(Course, canonicalize(course_id))
            if course is None or course.tutor_id != tutor_id:
                raise CourseNotFoundError(_NOT_OWNED)

            if name is not None:
                course.name = name
            if patch.description is not None:
                course.description = optional_text(patch.description)
            if image_url is not None:
                course.image_url = image_url

            session.commit()
            session.refresh(course)
            logger.info("Tutor %s updated course %s", tutor_id, course.id)
            return course
        finally:
            session.close()

    def delete_course(self, course_id: str, tutor_id: str) -> None:
        """Delete a course and, through the store, all of its enrollments.

        Raises:
            CourseNotFoundError: If the course doesn't exist or isn't owned by tutor_id.
        """
        session = self._db.get_session()
        try:
            stmt = delete(Course).where(
                Course.id == canonicalize(course_id),
                Course.tutor_id == tutor_id,
            )
            result = session.execute(stmt)
            if result.rowcount == 0:  # type: ignore[attr-defined]
                session.rollback()
                raise CourseNotFoundError(_NOT_OWNED)
            session.commit()
            logger.info("Tutor %s deleted course %s", tutor_id, course_id)
        finally:
            session.close()

    def _insert(
        self,
        code: str,
        tutor_id: str,
        name: str,
        description: str | None,
        image_url: str | None,
    ) -> Course:
        session = self._db.get_session()
        try:
            course = Course(
                id=code,
                tutor_id=tutor_id,
                name=name,
                description=description,
                image_url=image_url,
            )
            session.add(course)
            session.commit()
            session.refresh(course)
            return course
        except IntegrityError as e:
            session.rollback()
            if "FOREIGN KEY constraint failed" in str(e.orig):
                raise NotFoundError(f"Tutor with id '{tutor_id}' not found") from e
            raise
        finally:
            session.close()

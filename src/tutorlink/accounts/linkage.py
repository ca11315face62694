"""LinkageWorkflow - tutor approval of students registered under their code."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select

from tutorlink.accounts.exceptions import RequestNotFoundError
from tutorlink.store import LinkageStatus, LinkageTransition, Student, apply_transition

if TYPE_CHECKING:
    from tutorlink.store import Database

logger = logging.getLogger(__name__)


class LinkageWorkflow:
    """Drives Student.linkage_status from PENDING to APPROVED or DECLINED.

    Both targets are terminal. A tutor may only act on pending students whose
    tutor_id is their own; every other case is reported as RequestNotFoundError
    so callers cannot probe for students belonging to other tutors.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def accept(self, student_id: str, tutor_id: str) -> Student:
        """Approve a pending student.

        Args:
            student_id: The student's ID.
            tutor_id: ID of the tutor acting.

        Returns:
            The updated Student.

        Raises:
            RequestNotFoundError: If there is no pending request from this
                student to this tutor.
        """
        return self._apply(LinkageTransition.ACCEPT, student_id, tutor_id)

    def decline(self, student_id: str, tutor_id: str) -> Student:
        """Decline a pending student. See accept() for arguments and errors."""
        return self._apply(LinkageTransition.DECLINE, student_id, tutor_id)

    def list_pending(self, tutor_id: str) -> list[Student]:
        """List students awaiting this tutor's decision, newest first."""
        session = self._db.get_session()
        try:
            stmt = (
                select(Student)
                .where(
                    Student.tutor_id == tutor_id,
                    Student.linkage_status == LinkageStatus.PENDING.value,
                )
                .order_by(Student.created_at.desc())
            )
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def list_students(self, tutor_id: str) -> list[Student]:
        """List this tutor's approved students ordered by last, then first name."""
        session = self._db.get_session()
        try:
            stmt = (
                select(Student)
                .where(
                    Student.tutor_id == tutor_id,
                    Student.linkage_status == LinkageStatus.APPROVED.value,
                )
                .order_by(Student.last_name, Student.first_name)
            )
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def _apply(self, transition: LinkageTransition, student_id: str, tutor_id: str) -> Student:
        session = self._db.get_session()
        try:
            updated = apply_transition(
                session,
                Student.linkage_status,
                transition,
                Student.id == student_id,
                Student.tutor_id == tutor_id,
            )
            if updated == 0:
                session.rollback()
                logger.info(
                    "Tutor %s cannot %s student %s: no pending request",
                    tutor_id,
                    transition.name.lower(),
                    student_id,
                )
                raise RequestNotFoundError("Request not found or already processed")

            session.commit()
            student = session.get(Student, student_id)
            if student is None:
                raise RequestNotFoundError("Request not found or already processed")
            logger.info("Student %s is now %s by tutor %s", student_id, student.status, tutor_id)
            return student
        finally:
            session.close()

"""AccountDirectory - tutor and student accounts, registration and login."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from tutorlink.accounts.exceptions import DuplicateEmailError, UnknownTutorCodeError
from tutorlink.accounts.models import LoginResult, StudentProfile, TutorProfile
from tutorlink.auth import Role
from tutorlink.codes import CodeNamespace, canonicalize
from tutorlink.exceptions import (
    AccountNotApprovedError,
    InvalidCredentialsError,
    NotFoundError,
)
from tutorlink.logging import mask_email
from tutorlink.store import LinkageStatus, Student, Tutor, is_unique_violation
from tutorlink.validation import (
    check_password,
    normalize_email,
    optional_text,
    require_text,
)

if TYPE_CHECKING:
    from tutorlink.auth import CredentialService
    from tutorlink.codes import CodeGenerator
    from tutorlink.store import Database

logger = logging.getLogger(__name__)

AccountT = TypeVar("AccountT", Tutor, Student)

_INVALID_LOGIN = "Invalid email or password"

_NOT_APPROVED_MESSAGES = {
    LinkageStatus.PENDING: "Your registration is waiting for your tutor's approval",
    LinkageStatus.DECLINED: "Your registration was declined by your tutor",
}


class AccountDirectory:
    """Owns Tutor and Student accounts.

    Registering a student is the entry point into the linkage state machine:
    the student row is created in PENDING under the tutor its code resolved to.
    Transitions out of PENDING belong to LinkageWorkflow.
    """

    def __init__(
        self,
        db: Database,
        codes: CodeGenerator,
        credentials: CredentialService,
    ) -> None:
        """Initialize the directory.

        Args:
            db: Database handle.
            codes: Generator used to allocate tutor codes.
            credentials: Password hashing and token issuance.
        """
        self._db = db
        self._codes = codes
        self._credentials = credentials

    # --- Tutor Operations ---

    def register_tutor(self, profile: TutorProfile) -> Tutor:
        """Create a tutor account with a freshly allocated tutor code.

        Args:
            profile: Registration fields.

        Returns:
            The created Tutor.

        Raises:
            ValidationError: If a field is malformed.
            DuplicateEmailError: If a tutor already uses the email.
            CodeSpaceExhaustedError: If no free tutor code could be reserved.
        """
        email = normalize_email(profile.email)
        check_password(profile.password)
        first_name = require_text(profile.first_name, "First name")
        last_name = require_text(profile.last_name, "Last name")
        subject = optional_text(profile.subject)
        bio = optional_text(profile.bio)

        if self._find_by_email(Tutor, email) is not None:
            raise DuplicateEmailError(f"Email '{email}' is already registered")

        password_hash = self._credentials.hash(profile.password)

        def insert(code: str) -> Tutor:
            session = self._db.get_session()
            try:
                tutor = Tutor(
                    code=code,
                    email=email,
                    password_hash=password_hash,
                    first_name=first_name,
                    last_name=last_name,
                    subject=subject,
                    bio=bio,
                )
                session.add(tutor)
                session.commit()
                session.refresh(tutor)
                return tutor
            except IntegrityError as e:
                session.rollback()
                if is_unique_violation(e, "tutors.email"):
                    raise DuplicateEmailError(f"Email '{email}' is already registered") from e
                raise
            finally:
                session.close()

        tutor = self._codes.reserve(CodeNamespace.TUTOR, insert)
        logger.info(
            "Registered tutor %s (%s) with code %s", tutor.id, mask_email(email), tutor.code
        )
        return tutor

    def get_tutor(self, tutor_id: str) -> Tutor:
        """Get tutor by ID.

        Raises:
            NotFoundError: If tutor doesn't exist.
        """
        session = self._db.get_session()
        try:
            tutor = session.get(Tutor, tutor_id)
            if tutor is None:
                raise NotFoundError(f"Tutor with id '{tutor_id}' not found")
            return tutor
        finally:
            session.close()

    def resolve_tutor_by_code(self, code: str) -> Tutor:
        """Resolve a shareable tutor code, case-insensitively.

        Args:
            code: Tutor code as typed by a student.

        Returns:
            The Tutor owning the code.

        Raises:
            UnknownTutorCodeError: If no tutor has the code.
        """
        canonical = canonicalize(code)
        session = self._db.get_session()
        try:
            stmt = select(Tutor).where(Tutor.code == canonical)
            tutor = session.execute(stmt).scalar_one_or_none()
            if tutor is None:
                raise UnknownTutorCodeError(f"No tutor with code '{canonical}'")
            return tutor
        finally:
            session.close()

    def delete_tutor(self, tutor_id: str) -> None:
        """Delete a tutor.

        Students keep their rows with tutor_id cleared; the tutor's courses and
        their enrollments are deleted by the store.

        Raises:
            NotFoundError: If tutor doesn't exist.
        """
        session = self._db.get_session()
        try:
            result = session.execute(delete(Tutor).where(Tutor.id == tutor_id))
            if result.rowcount == 0:  # type: ignore[attr-defined]
                session.rollback()
                raise NotFoundError(f"Tutor with id '{tutor_id}' not found")
            session.commit()
            logger.info("Deleted tutor %s", tutor_id)
        finally:
            session.close()

    # --- Student Operations ---

    def register_student(self, profile: StudentProfile, tutor_code: str) -> Student:
        """Register a student under the tutor owning tutor_code.

        The code is resolved before anything is written, so an unknown code
        never leaves a student row behind.

        Args:
            profile: Registration fields.
            tutor_code: Shareable code of the student's tutor.

        Returns:
            The created Student, in PENDING state.

        Raises:
            ValidationError: If a field is malformed.
            UnknownTutorCodeError: If the code resolves to no tutor.
            DuplicateEmailError: If any student, in any state, uses the email.
        """
        email = normalize_email(profile.email)
        check_password(profile.password)
        first_name = require_text(profile.first_name, "First name")
        last_name = require_text(profile.last_name, "Last name")
        grade_level = optional_text(profile.grade_level)

        tutor = self.resolve_tutor_by_code(tutor_code)

        if self._find_by_email(Student, email) is not None:
            raise DuplicateEmailError(f"Email '{email}' is already registered")

        password_hash = self._credentials.hash(profile.password)

        session = self._db.get_session()
        try:
            student = Student(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                grade_level=grade_level,
                tutor_id=tutor.id,
            )
            session.add(student)
            session.commit()
            session.refresh(student)
        except IntegrityError as e:
            session.rollback()
            if is_unique_violation(e, "students.email"):
                raise DuplicateEmailError(f"Email '{email}' is already registered") from e
            if "FOREIGN KEY constraint failed" in str(e.orig):
                # Tutor deleted between resolution and insert
                raise UnknownTutorCodeError(f"No tutor with code '{tutor.code}'") from e
            raise
        finally:
            session.close()

        logger.info(
            "Registered student %s (%s) pending approval by tutor %s",
            student.id,
            mask_email(email),
            tutor.id,
        )
        return student

    def get_student(self, student_id: str) -> Student:
        """Get student by ID.

        Raises:
            NotFoundError: If student doesn't exist.
        """
        session = self._db.get_session()
        try:
            student = session.get(Student, student_id)
            if student is None:
                raise NotFoundError(f"Student with id '{student_id}' not found")
            return student
        finally:
            session.close()

    def delete_student(self, student_id: str) -> None:
        """Delete a student and, through the store, their enrollments.

        Raises:
            NotFoundError: If student doesn't exist.
        """
        session = self._db.get_session()
        try:
            result = session.execute(delete(Student).where(Student.id == student_id))
            if result.rowcount == 0:  # type: ignore[attr-defined]
                session.rollback()
                raise NotFoundError(f"Student with id '{student_id}' not found")
            session.commit()
            logger.info("Deleted student %s", student_id)
        finally:
            session.close()

    # --- Login ---

    def login_tutor(self, email: str, password: str) -> LoginResult:
        """Check tutor credentials and issue a session token.

        Raises:
            ValidationError: If the email is malformed.
            InvalidCredentialsError: If the email is unknown or the password wrong.
        """
        tutor = self._authenticate(Tutor, email, password)
        token = self._credentials.issue_token(tutor.id, Role.TUTOR)
        logger.info("Tutor %s logged in", tutor.id)
        return LoginResult(token=token, role=Role.TUTOR, account=tutor)

    def login_student(self, email: str, password: str) -> LoginResult:
        """Check student credentials and issue a session token.

        Only approved students get a session.

        Raises:
            ValidationError: If the email is malformed.
            InvalidCredentialsError: If the email is unknown or the password wrong.
            AccountNotApprovedError: If the tutor has not approved the student.
        """
        student = self._authenticate(Student, email, password)
        status = student.status
        if status is not LinkageStatus.APPROVED:
            logger.info("Refused session for student %s in state %s", student.id, status)
            raise AccountNotApprovedError(_NOT_APPROVED_MESSAGES[status])

        token = self._credentials.issue_token(student.id, Role.STUDENT)
        logger.info("Student %s logged in", student.id)
        return LoginResult(token=token, role=Role.STUDENT, account=student)

    def _authenticate(self, model: type[AccountT], email: str, password: str) -> AccountT:
        account = self._find_by_email(model, normalize_email(email))
        if account is None or not self._credentials.verify(password, account.password_hash):
            logger.warning("Failed %s login for %s", model.__tablename__, mask_email(email))
            raise InvalidCredentialsError(_INVALID_LOGIN)
        return account

    def _find_by_email(self, model: type[AccountT], email: str) -> AccountT | None:
        session = self._db.get_session()
        try:
            stmt = select(model).where(model.email == email)
            return session.execute(stmt).scalar_one_or_none()
        finally:
            session.close()

"""TutorPlatform - wires the core components over one database handle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tutorlink.accounts import AccountDirectory, LinkageWorkflow
from tutorlink.auth import BcryptJWTCredentials
from tutorlink.codes import CodeGenerator
from tutorlink.courses import CourseRegistry, EnrollmentWorkflow
from tutorlink.store import Database

if TYPE_CHECKING:
    from tutorlink.auth import CredentialService
    from tutorlink.config import Settings

logger = logging.getLogger(__name__)


class TutorPlatform:
    """The core components sharing one Database.

    Attributes:
        db: Database handle.
        credentials: Credential service.
        codes: Code generator.
        accounts: Account directory.
        linkage: Linkage workflow.
        courses: Course registry.
        enrollment: Enrollment workflow.
    """

    def __init__(
        self,
        db: Database,
        credentials: CredentialService,
        code_max_attempts: int = 32,
    ) -> None:
        self.db = db
        self.credentials = credentials
        self.codes = CodeGenerator(db, max_attempts=code_max_attempts)
        self.accounts = AccountDirectory(db, self.codes, credentials)
        self.linkage = LinkageWorkflow(db)
        self.courses = CourseRegistry(db, self.codes)
        self.enrollment = EnrollmentWorkflow(db)

    @classmethod
    def from_settings(cls, settings: Settings) -> TutorPlatform:
        """Open the database and build the components from settings.

        Creates tables if they don't exist.
        """
        db = Database(settings.db_path)
        db.create_tables()
        credentials = BcryptJWTCredentials(
            secret=settings.jwt_secret,
            token_ttl_minutes=settings.token_ttl_minutes,
            rounds=settings.bcrypt_rounds,
        )
        logger.info("TutorPlatform opened database %s", settings.db_path)
        return cls(db, credentials, code_max_attempts=settings.code_max_attempts)

    def close(self) -> None:
        """Close the database connection."""
        self.db.close()

"""CodeGenerator - collision-checked shareable codes for tutors and courses."""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tutorlink.exceptions import CodeSpaceExhaustedError
from tutorlink.store import COURSE_CODE_LENGTH, Course, Tutor, is_unique_violation

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute, Session

    from tutorlink.store import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")

CODE_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_MAX_ATTEMPTS = 32


class CodeNamespace(StrEnum):
    """Independent uniqueness namespaces for shareable codes."""

    TUTOR = "tutor"
    COURSE = "course"


@dataclass(frozen=True)
class CodeFormat:
    """Shape of a code: fixed prefix followed by random characters.

    Attributes:
        alphabet: Characters the random part is drawn from.
        length: Number of random characters.
        prefix: Constant leading text.
    """

    alphabet: str
    length: int
    prefix: str = ""

    def draw(self) -> str:
        """Draw one candidate uniformly at random."""
        return self.prefix + "".join(secrets.choice(self.alphabet) for _ in range(self.length))

    def matches(self, code: str) -> bool:
        """Check that code has this format's prefix, length and alphabet."""
        if not code.startswith(self.prefix):
            return False
        body = code[len(self.prefix) :]
        return len(body) == self.length and all(ch in self.alphabet for ch in body)


DEFAULT_FORMATS: dict[CodeNamespace, CodeFormat] = {
    CodeNamespace.TUTOR: CodeFormat(alphabet=CODE_ALPHABET, length=5, prefix="TUT"),
    CodeNamespace.COURSE: CodeFormat(alphabet=CODE_ALPHABET, length=COURSE_CODE_LENGTH),
}

_UNIQUE_COLUMNS: dict[CodeNamespace, InstrumentedAttribute[str]] = {
    CodeNamespace.TUTOR: Tutor.code,
    CodeNamespace.COURSE: Course.id,
}


def canonicalize(code: str) -> str:
    """Normalize a code for storage and lookup (trimmed, upper-case)."""
    return code.strip().upper()


class CodeGenerator:
    """Draws codes and checks them against the namespace's unique column.

    The generator never writes. Use reserve() to insert a row under a fresh
    code with retry on insert-time conflicts.
    """

    def __init__(
        self,
        db: Database,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        formats: Mapping[CodeNamespace, CodeFormat] | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            db: Database handle used for existence checks.
            max_attempts: Candidates tried before giving up.
            formats: Per-namespace format overrides.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._db = db
        self.max_attempts = max_attempts
        self._formats = {**DEFAULT_FORMATS, **(formats or {})}

    def format_for(self, namespace: CodeNamespace) -> CodeFormat:
        return self._formats[namespace]

    def is_well_formed(self, namespace: CodeNamespace, code: str) -> bool:
        """Check a canonical code against the namespace's format."""
        return self.format_for(namespace).matches(code)

    def generate(self, namespace: CodeNamespace) -> str:
        """Return a code not currently used in the namespace.

        Args:
            namespace: Which namespace to draw from.

        Returns:
            A free, canonical code.

        Raises:
            CodeSpaceExhaustedError: If max_attempts candidates were all taken.
        """
        fmt = self.format_for(namespace)
        session = self._db.get_session()
        try:
            for attempt in range(1, self.max_attempts + 1):
                candidate = canonicalize(fmt.draw())
                if not self._is_taken(session, namespace, candidate):
                    return candidate
                logger.debug(
                    "Candidate %s code %s taken (attempt %d/%d)",
                    namespace,
                    candidate,
                    attempt,
                    self.max_attempts,
                )
        finally:
            session.close()

        logger.error("No free %s code after %d attempts", namespace, self.max_attempts)
        raise CodeSpaceExhaustedError(
            f"No free {namespace} code after {self.max_attempts} attempts"
        )

    def reserve(self, namespace: CodeNamespace, insert: Callable[[str], T]) -> T:
        """Insert a row under a freshly generated code, retrying on conflict.

        The existence check in generate() can race with a concurrent insert of
        the same code; the store's unique constraint settles it and the loser
        retries with a new code.

        Args:
            namespace: Which namespace to draw from.
            insert: Inserts and commits the owning row for a code. Must roll
                back its own session before letting IntegrityError escape.

        Returns:
            Whatever insert returned.

        Raises:
            CodeSpaceExhaustedError: If every attempt hit a conflict.
            IntegrityError: For constraint failures unrelated to the code.
        """
        column = _UNIQUE_COLUMNS[namespace]
        qualified = f"{column.class_.__tablename__}.{column.key}"
        for attempt in range(1, self.max_attempts + 1):
            code = self.generate(namespace)
            try:
                return insert(code)
            except IntegrityError as e:
                if not is_unique_violation(e, qualified):
                    raise
                logger.warning(
                    "%s code %s claimed concurrently (attempt %d/%d)",
                    namespace,
                    code,
                    attempt,
                    self.max_attempts,
                )

        logger.error("Could not reserve a %s code after %d attempts", namespace, self.max_attempts)
        raise CodeSpaceExhaustedError(
            f"Could not reserve a {namespace} code after {self.max_attempts} attempts"
        )

    def _is_taken(self, session: Session, namespace: CodeNamespace, code: str) -> bool:
        column = _UNIQUE_COLUMNS[namespace]
        stmt = select(column).where(column == code).limit(1)
        return session.execute(stmt).first() is not None

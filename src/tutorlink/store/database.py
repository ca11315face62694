"""SQLite access for TutorLink: engine, sessions and constraint helpers."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tutorlink.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy.exc import IntegrityError

MEMORY = ":memory:"


def _enable_pragmas(dbapi_connection: object, _connection_record: object) -> None:
    # SQLite leaves foreign keys off per connection; the delete rules need them.
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Handle on the TutorLink SQLite database.

    Every component receives the same handle and opens its own short-lived
    session per operation. The engine is created on first use.
    """

    def __init__(self, db_path: str = "tutorlink.db") -> None:
        """Initialize the handle without connecting.

        Args:
            db_path: SQLite file path, or ":memory:" for a private in-memory store.
        """
        self.db_path = db_path
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        """Engine with WAL and foreign keys on, created on first access."""
        if self._engine is None:
            self._engine = self._create_engine()
            event.listen(self._engine, "connect", _enable_pragmas)
        return self._engine

    def _create_engine(self) -> Engine:
        # Requests may be served from worker threads, so connections are not
        # pinned to the creating thread.
        connect_args = {"check_same_thread": False}
        if self.db_path == MEMORY:
            # One shared connection, or every session would see an empty database
            return create_engine(
                f"sqlite:///{MEMORY}", poolclass=StaticPool, connect_args=connect_args
            )
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(f"sqlite:///{self.db_path}", connect_args=connect_args)

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Session factory; loaded rows stay readable after commit."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory

    def create_tables(self) -> None:
        """Create the tutors, students, courses and enrollments tables if missing."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Open a session. The caller closes it."""
        return self.session_factory()

    def foreign_keys_enabled(self) -> bool:
        """Check if foreign key enforcement is on."""
        with self.engine.connect() as conn:
            return conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def is_wal_mode(self) -> bool:
        """Check if the journal is in WAL mode."""
        with self.engine.connect() as conn:
            return conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"

    def close(self) -> None:
        """Dispose of the engine. The handle reconnects if used again."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None


def is_unique_violation(error: IntegrityError, *columns: str) -> bool:
    """Check whether an IntegrityError is a UNIQUE/PRIMARY KEY failure on columns.

    Args:
        error: The error raised on flush or commit.
        columns: Qualified column names, e.g. "tutors.code".

    Returns:
        True if every given column is named in the constraint failure.
    """
    message = str(error.orig)
    if "UNIQUE constraint failed" not in message:
        return False
    return all(column in message for column in columns)

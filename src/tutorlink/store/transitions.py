"""Legal status transitions and their conditional-update execution.

Only the transitions enumerated here exist. Each one is applied as a single
``UPDATE ... WHERE status = <source>`` so two concurrent callers cannot both
succeed: the loser sees zero affected rows.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import update

from tutorlink.store.models import EnrollmentStatus, LinkageStatus

if TYPE_CHECKING:
    from enum import StrEnum

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import InstrumentedAttribute, Session


class LinkageTransition(Enum):
    """Tutor-initiated transitions of Student.linkage_status."""

    ACCEPT = (LinkageStatus.PENDING, LinkageStatus.APPROVED)
    DECLINE = (LinkageStatus.PENDING, LinkageStatus.DECLINED)

    @property
    def source(self) -> LinkageStatus:
        return self.value[0]

    @property
    def target(self) -> LinkageStatus:
        return self.value[1]


class EnrollmentTransition(Enum):
    """Tutor-initiated transitions of Enrollment.status."""

    APPROVE = (EnrollmentStatus.PENDING, EnrollmentStatus.APPROVED)
    REJECT = (EnrollmentStatus.PENDING, EnrollmentStatus.REJECTED)

    @property
    def source(self) -> EnrollmentStatus:
        return self.value[0]

    @property
    def target(self) -> EnrollmentStatus:
        return self.value[1]


def apply_transition(
    session: Session,
    column: InstrumentedAttribute[str],
    transition: LinkageTransition | EnrollmentTransition,
    *criteria: ColumnElement[bool],
) -> int:
    """Move matching rows from the transition's source to its target status.

    Does not commit; the caller owns the session.

    Args:
        session: Open session.
        column: Status column of the mapped class (e.g. Student.linkage_status).
        transition: The transition to apply.
        criteria: Extra WHERE clauses (identity and ownership).

    Returns:
        Number of rows updated (0 or 1 for key-scoped criteria).
    """
    source: StrEnum = transition.source
    target: StrEnum = transition.target
    values: dict[Any, str] = {column: target.value}
    stmt = (
        update(column.class_)
        .where(column == source.value, *criteria)
        .values(values)
        .execution_options(synchronize_session=False)
    )
    result = session.execute(stmt)
    return result.rowcount  # type: ignore[attr-defined, no-any-return]

"""Error taxonomy shared by every TutorLink component."""


class TutorLinkError(Exception):
    """Base exception for TutorLink errors."""


class ValidationError(TutorLinkError):
    """Input is malformed. Raised before any state is written."""


class InvalidCredentialsError(TutorLinkError):
    """Email or password did not match."""


class AccountNotApprovedError(TutorLinkError):
    """Student account has not been approved by its tutor."""


class NotFoundError(TutorLinkError):
    """Entity is missing, in the wrong state, or owned by someone else.

    These cases are deliberately indistinguishable to the caller.
    """


class ConflictError(TutorLinkError):
    """A uniqueness constraint would be violated."""


class CodeSpaceExhaustedError(TutorLinkError):
    """Code generator ran out of attempts without finding a free code."""


class PermissionDeniedError(TutorLinkError):
    """Caller's role may not use this operation."""

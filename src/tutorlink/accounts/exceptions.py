"""Exceptions for the accounts module."""

from tutorlink.exceptions import ConflictError, NotFoundError


class UnknownTutorCodeError(NotFoundError):
    """No tutor has the given code."""


class DuplicateEmailError(ConflictError):
    """Another account of the same kind already uses this email."""


class RequestNotFoundError(NotFoundError):
    """No pending linkage request for this student under this tutor."""

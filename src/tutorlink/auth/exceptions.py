"""Exceptions for the auth module."""

from tutorlink.exceptions import InvalidCredentialsError


class InvalidTokenError(InvalidCredentialsError):
    """Session token is malformed, forged or expired."""

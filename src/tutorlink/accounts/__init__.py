"""Accounts - tutor/student directory and the linkage approval workflow."""

from tutorlink.accounts.directory import AccountDirectory
from tutorlink.accounts.exceptions import (
    DuplicateEmailError,
    RequestNotFoundError,
    UnknownTutorCodeError,
)
from tutorlink.accounts.linkage import LinkageWorkflow
from tutorlink.accounts.models import LoginResult, StudentProfile, TutorProfile

__all__ = [
    "AccountDirectory",
    "DuplicateEmailError",
    "LinkageWorkflow",
    "LoginResult",
    "RequestNotFoundError",
    "StudentProfile",
    "TutorProfile",
    "UnknownTutorCodeError",
]

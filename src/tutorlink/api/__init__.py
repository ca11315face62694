"""REST API for TutorLink."""

from tutorlink.api.app import app, create_app
from tutorlink.api.models import APIResponse

__all__ = [
    "APIResponse",
    "app",
    "create_app",
]

"""TutorLink - tutor/student linkage and course enrollment workflows."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__

"""Input checks shared by the directory and the course registry.

Every helper raises ValidationError and is called before anything is written.
"""

from __future__ import annotations

import re

from email_validator import EmailNotValidError, validate_email
from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from tutorlink.auth import MAX_PASSWORD_BYTES
from tutorlink.exceptions import ValidationError

MIN_PASSWORD_LENGTH = 6

_DATA_URL_RE = re.compile(r"^data:image/(png|jpeg|jpg|gif|webp);base64,")
_http_url = TypeAdapter(HttpUrl)


def normalize_email(email: str) -> str:
    """Validate an email address and return its lower-cased normalized form.

    Only the syntax is checked; no DNS lookups are made.
    """
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("A valid email address is required") from e
    return result.normalized.lower()


def check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def require_text(value: str, field: str) -> str:
    """Return value trimmed; empty values are rejected."""
    stripped = value.strip()
    if not stripped:
        raise ValidationError(f"{field} is required")
    return stripped


def optional_text(value: str | None) -> str | None:
    """Trim value; blank becomes None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def check_image_url(value: str) -> str:
    """Accept http(s) URLs and base64 image data URLs. The value is stored as given."""
    if _DATA_URL_RE.match(value):
        return value
    try:
        _http_url.validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError("image_url must be a valid URL or data URL") from e
    return value

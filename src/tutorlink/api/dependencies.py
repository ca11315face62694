"""FastAPI dependencies for dependency injection.

The platform lives on ``app.state`` rather than in module globals, so each
app instance (and each test) carries its own database handle.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tutorlink.auth import Role, TokenClaims
from tutorlink.exceptions import InvalidCredentialsError, PermissionDeniedError
from tutorlink.platform import TutorPlatform

bearer_scheme = HTTPBearer(auto_error=False)


def get_platform(request: Request) -> TutorPlatform:
    """Dependency that provides the app's TutorPlatform."""
    platform: TutorPlatform | None = getattr(request.app.state, "platform", None)
    if platform is None:
        raise RuntimeError("TutorPlatform not initialized. Start the app lifespan first.")
    return platform


# Type alias for dependency injection
PlatformDep = Annotated[TutorPlatform, Depends(get_platform)]


def get_current_claims(
    platform: PlatformDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenClaims:
    """Decode the bearer token on the request.

    Raises:
        InvalidCredentialsError: If the token is missing, expired or forged.
    """
    if credentials is None:
        raise InvalidCredentialsError("Access token required")
    return platform.credentials.decode_token(credentials.credentials)


ClaimsDep = Annotated[TokenClaims, Depends(get_current_claims)]


def require_tutor(claims: ClaimsDep) -> TokenClaims:
    """Dependency that only lets tutor tokens through."""
    if claims.role is not Role.TUTOR:
        raise PermissionDeniedError("Tutor access required")
    return claims


def require_student(claims: ClaimsDep) -> TokenClaims:
    """Dependency that only lets student tokens through."""
    if claims.role is not Role.STUDENT:
        raise PermissionDeniedError("Student access required")
    return claims


TutorDep = Annotated[TokenClaims, Depends(require_tutor)]
StudentDep = Annotated[TokenClaims, Depends(require_student)]

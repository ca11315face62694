"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tutorlink.api.models import APIResponse
from tutorlink.api.routes import auth, courses, students, tutors
from tutorlink.config import Settings
from tutorlink.exceptions import (
    AccountNotApprovedError,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    TutorLinkError,
    ValidationError,
)
from tutorlink.logging import sanitize_for_log, setup_logging
from tutorlink.platform import TutorPlatform

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

# Most specific first; anything unlisted (e.g. CodeSpaceExhaustedError) is a 500.
ERROR_STATUS_CODES: list[tuple[type[TutorLinkError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (AccountNotApprovedError, status.HTTP_403_FORBIDDEN),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def status_code_for(exc: TutorLinkError) -> int:
    """Map a core error to its HTTP status code."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """Translate core errors into APIResponse envelopes."""

    @app.exception_handler(TutorLinkError)
    async def tutorlink_error_handler(request: Request, exc: TutorLinkError) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "%s %s failed: %s",
                request.method,
                request.url.path,
                sanitize_for_log(str(exc)),
            )
            message = "Internal server error"
        else:
            message = str(exc)

        headers = None
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=status_code,
            content=APIResponse[None](data=None, error=message).model_dump(),
            headers=headers,
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the platform from settings unless one was injected in create_app().
    When the settings come from the environment, logging is set up here too.
    """
    owns_platform = app.state.platform is None
    if owns_platform:
        settings = app.state.settings
        if settings is None:
            setup_logging()
            settings = Settings.from_env()
        app.state.platform = TutorPlatform.from_settings(settings)

    yield

    if owns_platform:
        app.state.platform.close()
        app.state.platform = None


def create_app(
    settings: Settings | None = None,
    platform: TutorPlatform | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings used at startup. Read from the environment when omitted.
        platform: Pre-built platform to serve; the app will not close it.
    """
    app = FastAPI(
        title="TutorLink API",
        description="REST API for TutorLink - tutor linkage and course enrollment",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings
    app.state.platform = platform

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(tutors.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(students.router, prefix="/api/v1")

    return app


# Default app instance; settings are read from the environment at startup.
app = create_app()

"""Unit tests for application setup and error translation."""

import logging
import os
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tutorlink.accounts import DuplicateEmailError, RequestNotFoundError, UnknownTutorCodeError
from tutorlink.api.app import create_app, register_exception_handlers, status_code_for
from tutorlink.api.dependencies import get_platform
from tutorlink.auth import InvalidTokenError
from tutorlink.courses import AlreadyEnrolledError, CourseCodeTakenError, CourseNotFoundError
from tutorlink.exceptions import (
    AccountNotApprovedError,
    CodeSpaceExhaustedError,
    PermissionDeniedError,
    TutorLinkError,
    ValidationError,
)
from tutorlink.platform import TutorPlatform


@pytest.mark.unit
class TestStatusCodeFor:
    """Tests for status_code_for."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (ValidationError("x"), 400),
            (InvalidTokenError("x"), 401),
            (AccountNotApprovedError("x"), 403),
            (PermissionDeniedError("x"), 403),
            (UnknownTutorCodeError("x"), 404),
            (RequestNotFoundError("x"), 404),
            (CourseNotFoundError("x"), 404),
            (DuplicateEmailError("x"), 409),
            (AlreadyEnrolledError("x"), 409),
            (CourseCodeTakenError("x"), 409),
            (CodeSpaceExhaustedError("x"), 500),
            (TutorLinkError("x"), 500),
        ],
    )
    def test_mapping(self, error: TutorLinkError, expected: int) -> None:
        assert status_code_for(error) == expected


@pytest.mark.unit
class TestErrorEnvelope:
    """Tests for the registered exception handler."""

    @pytest.fixture
    def client(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/boom")
        def boom() -> None:
            raise CodeSpaceExhaustedError("No free course code after 32 attempts")

        @app.get("/conflict")
        def conflict() -> None:
            raise DuplicateEmailError("Email 'a@b.co' is already registered")

        with TestClient(app, raise_server_exceptions=False) as client:
            yield client

    def test_server_errors_hide_details(self, client: TestClient) -> None:
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"data": None, "error": "Internal server error"}

    def test_client_errors_carry_message(self, client: TestClient) -> None:
        response = client.get("/conflict")

        assert response.status_code == 409
        assert response.json()["error"] == "Email 'a@b.co' is already registered"


@pytest.mark.unit
class TestCreateApp:
    """Tests for create_app."""

    def test_routes_mounted_under_api_v1(self, platform: TutorPlatform) -> None:
        app = create_app(platform=platform)
        paths = app.openapi()["paths"]
        assert "/api/v1/auth/register/tutor" in paths
        assert "/api/v1/tutors/requests" in paths
        assert "/api/v1/courses/{course_id}/enrollments" in paths
        assert "/api/v1/students/me/enrollments" in paths

    def test_injected_platform_is_not_closed(self, platform: TutorPlatform) -> None:
        app = create_app(platform=platform)
        with TestClient(app):
            pass
        assert app.state.platform is platform
        assert platform.db.foreign_keys_enabled()

    def test_get_platform_requires_startup(self) -> None:
        app = FastAPI()
        app.state.platform = None
        request = SimpleNamespace(app=app)
        with pytest.raises(RuntimeError, match="not initialized"):
            get_platform(request)

    def test_env_startup_sets_up_logging(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            env = {
                "TUTORLINK_JWT_SECRET": "app-test-secret-with-enough-length-000",
                "TUTORLINK_DB_PATH": str(Path(tmpdir) / "tutorlink.db"),
                "TUTORLINK_LOG_DIR": tmpdir,
                "TUTORLINK_LOG_LEVEL": "INFO",
            }
            try:
                with patch.dict(os.environ, env), TestClient(create_app()):
                    pass

                log_text = (Path(tmpdir) / "tutorlink.log").read_text()
                assert "Logging to" in log_text
            finally:
                root = logging.getLogger("tutorlink")
                for handler in list(root.handlers):
                    handler.close()
                    root.removeHandler(handler)

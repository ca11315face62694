"""Unit tests for student routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tutorlink.api.app import register_exception_handlers
from tutorlink.api.routes import students
from tutorlink.auth import Role
from tutorlink.courses import CourseProfile
from tutorlink.platform import TutorPlatform
from tutorlink.store import Course, Student, Tutor


@pytest.fixture
def app(platform: TutorPlatform):
    """Create a test FastAPI app serving only the student routes."""
    app = FastAPI()
    app.state.platform = platform
    register_exception_handlers(app)
    app.include_router(students.router, prefix="/api/v1")
    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def auth_headers(platform: TutorPlatform, approved_student: Student) -> dict[str, str]:
    """Bearer header for the approved student fixture."""
    token = platform.credentials.issue_token(approved_student.id, Role.STUDENT)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def course(platform: TutorPlatform, tutor: Tutor) -> Course:
    """A course owned by the tutor fixture."""
    return platform.courses.create_course(tutor.id, CourseProfile(name="Algebra"))


@pytest.mark.unit
class TestJoinCourse:
    """Tests for POST /students/me/enrollments."""

    def test_join(self, client: TestClient, auth_headers: dict, course: Course) -> None:
        response = client.post(
            "/api/v1/students/me/enrollments",
            json={"course_code": course.code.lower()},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["course_id"] == course.id
        assert data["status"] == "pending"

    def test_join_twice(self, client: TestClient, auth_headers: dict, course: Course) -> None:
        body = {"course_code": course.code}
        client.post("/api/v1/students/me/enrollments", json=body, headers=auth_headers)
        response = client.post("/api/v1/students/me/enrollments", json=body, headers=auth_headers)

        assert response.status_code == 409

    def test_join_unknown_course(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            "/api/v1/students/me/enrollments",
            json={"course_code": "NOPE123"},
            headers=auth_headers,
        )

        assert response.status_code == 404

    def test_tutor_token_forbidden(
        self, client: TestClient, platform: TutorPlatform, tutor: Tutor, course: Course
    ) -> None:
        token = platform.credentials.issue_token(tutor.id, Role.TUTOR)
        response = client.post(
            "/api/v1/students/me/enrollments",
            json={"course_code": course.code},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Student access required"


@pytest.mark.unit
class TestMyEnrollments:
    """Tests for GET /students/me/enrollments."""

    def test_lists_with_course(
        self,
        client: TestClient,
        auth_headers: dict,
        platform: TutorPlatform,
        approved_student: Student,
        course: Course,
    ) -> None:
        platform.enrollment.request_join(approved_student.id, course.code)
        response = client.get("/api/v1/students/me/enrollments", headers=auth_headers)

        assert response.status_code == 200
        [item] = response.json()["data"]
        assert item["course"]["name"] == "Algebra"
        assert item["status"] == "pending"

    def test_filter_by_status(
        self,
        client: TestClient,
        auth_headers: dict,
        platform: TutorPlatform,
        approved_student: Student,
        course: Course,
    ) -> None:
        platform.enrollment.request_join(approved_student.id, course.code)
        response = client.get(
            "/api/v1/students/me/enrollments",
            params={"status": "rejected"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"] == []

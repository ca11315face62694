"""Registration, login and current-account endpoints."""

from fastapi import APIRouter, status

from tutorlink.accounts import LoginResult, StudentProfile, TutorProfile
from tutorlink.api.dependencies import ClaimsDep, PlatformDep
from tutorlink.api.models import (
    APIResponse,
    LoginRequest,
    LoginResponse,
    StudentRegister,
    StudentResponse,
    TutorRegister,
    TutorResponse,
    student_to_response,
    tutor_to_response,
)
from tutorlink.auth import Role

router = APIRouter(prefix="/auth", tags=["auth"])


def _login_to_response(result: LoginResult) -> LoginResponse:
    if result.role is Role.TUTOR:
        account: TutorResponse | StudentResponse = tutor_to_response(result.account)
    else:
        account = student_to_response(result.account)
    return LoginResponse(token=result.token, role=result.role.value, account=account)


@router.post(
    "/register/tutor",
    response_model=APIResponse[TutorResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_tutor(body: TutorRegister, platform: PlatformDep) -> APIResponse[TutorResponse]:
    """Register a tutor and issue their shareable code."""
    tutor = platform.accounts.register_tutor(
        TutorProfile(
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            subject=body.subject,
            bio=body.bio,
        )
    )
    return APIResponse(data=tutor_to_response(tutor))


@router.post(
    "/register/student",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_student(
    body: StudentRegister, platform: PlatformDep
) -> APIResponse[StudentResponse]:
    """Register a student under a tutor code. The student starts pending."""
    student = platform.accounts.register_student(
        StudentProfile(
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            grade_level=body.grade_level,
        ),
        tutor_code=body.tutor_code,
    )
    return APIResponse(data=student_to_response(student))


@router.post("/login/tutor", response_model=APIResponse[LoginResponse])
def login_tutor(body: LoginRequest, platform: PlatformDep) -> APIResponse[LoginResponse]:
    """Log a tutor in."""
    result = platform.accounts.login_tutor(body.email, body.password)
    return APIResponse(data=_login_to_response(result))


@router.post("/login/student", response_model=APIResponse[LoginResponse])
def login_student(body: LoginRequest, platform: PlatformDep) -> APIResponse[LoginResponse]:
    """Log an approved student in."""
    result = platform.accounts.login_student(body.email, body.password)
    return APIResponse(data=_login_to_response(result))


@router.get("/me", response_model=APIResponse[TutorResponse | StudentResponse])
def get_me(
    claims: ClaimsDep, platform: PlatformDep
) -> APIResponse[TutorResponse | StudentResponse]:
    """Get the account the bearer token belongs to."""
    if claims.role is Role.TUTOR:
        tutor = platform.accounts.get_tutor(claims.subject)
        return APIResponse(data=tutor_to_response(tutor))
    student = platform.accounts.get_student(claims.subject)
    return APIResponse(data=student_to_response(student))

"""
API routes - Registration, login and current-user endpoints.

This module defines the HTTP endpoints:
- POST /register - Create an account and receive a bearer token
- POST /login - Exchange email and password for a bearer token
- GET /user - Return the authenticated user's record

Endpoints are plain `def` so FastAPI runs them in its threadpool;
bcrypt and psycopg calls block.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import (
    get_client_ip,
    get_current_user,
    get_login_service,
    get_registration_service,
    get_user_repository,
)
from src.api.errors import outcome_response, validation_error_response
from src.api.models import (
    AuthResponse,
    MessageResponse,
    StatusResponse,
    UserProfile,
    ValidationErrorResponse,
)
from src.api.validation import Invalid, validate_login, validate_registration
from src.domain.login import LoginService
from src.domain.ports import User, UserRepository
from src.domain.registration import RegistrationService

router = APIRouter(tags=["auth"])

JsonBody = Annotated[dict[str, Any], Body()]


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ValidationErrorResponse, "description": "Validation error"},
        429: {"model": StatusResponse, "description": "Too many attempts from this IP"},
        500: {"model": StatusResponse, "description": "Registration failed"},
    },
    summary="Register a new user",
    description="Submit name, email, password and password_confirmation. "
    "Returns the public user data and a bearer token.",
)
def register(
    payload: JsonBody,
    client_ip: str = Depends(get_client_ip),
    repository: UserRepository = Depends(get_user_repository),
    service: RegistrationService = Depends(get_registration_service),
) -> JSONResponse:
    """
    Register a new user.

    - **name**: Display name
    - **email**: Valid, not yet registered email address
    - **password**: Password (minimum 8 characters)
    - **password_confirmation**: Must equal password
    """
    result = validate_registration(payload, repository)
    if isinstance(result, Invalid):
        return validation_error_response(result)

    data = result.value
    outcome = service.register(
        data.name, data.email, data.password, data.password_confirmation, client_ip
    )
    return outcome_response(outcome)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"model": StatusResponse, "description": "Invalid credentials"},
        422: {"model": ValidationErrorResponse, "description": "Validation error"},
        429: {"model": StatusResponse, "description": "Too many attempts for this email"},
        500: {"model": StatusResponse, "description": "Login failed"},
    },
    summary="Log in with email and password",
    description="Returns the public user data and a new bearer token. "
    "Unknown email and wrong password produce the same 401 response.",
)
def login(
    payload: JsonBody,
    client_ip: str = Depends(get_client_ip),
    service: LoginService = Depends(get_login_service),
) -> JSONResponse:
    """
    Authenticate a user.

    - **email**: Registered email address (case and surrounding spaces ignored)
    - **password**: Account password
    """
    result = validate_login(payload)
    if isinstance(result, Invalid):
        return validation_error_response(result)

    data = result.value
    return outcome_response(service.login(data.email, data.password, client_ip))


@router.get(
    "/user",
    response_model=UserProfile,
    responses={401: {"model": MessageResponse, "description": "Unauthenticated"}},
    summary="Current user",
    description="Requires `Authorization: Bearer <token>`.",
)
def current_user(user: User = Depends(get_current_user)) -> dict[str, Any]:
    """Return the authenticated user's full record."""
    return user.to_profile()

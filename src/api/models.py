"""
API request and response models.

Pydantic models for request validation and OpenAPI schema generation.
Request models are applied by src.api.validation rather than directly by
FastAPI, so that field errors can be rendered in the API's own 422 shape.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    name: str = Field(..., max_length=255, description="Display name")
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, description="User password (min 8 characters)")
    password_confirmation: str = Field(..., description="Must equal password")


class LoginRequest(BaseModel):
    """Request model for login."""

    email: EmailStr
    password: str


class UserData(BaseModel):
    """Public user fields returned by registration and login."""

    name: str
    email: str


class AuthResponse(BaseModel):
    """Response model for successful registration or login."""

    status: bool = True
    message: str
    data: UserData
    token: str


class StatusResponse(BaseModel):
    """Response model for throttled or failed registration and login."""

    status: bool = False
    message: str


class ValidationErrorResponse(BaseModel):
    """Response model for 422 validation failures."""

    message: str
    errors: dict[str, list[str]]


class MessageResponse(BaseModel):
    """Bare message response (e.g. 401 Unauthenticated)."""

    message: str


class UserProfile(BaseModel):
    """Full record of the authenticated user."""

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

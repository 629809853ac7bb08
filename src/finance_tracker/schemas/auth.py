"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from finance_tracker.schemas.base import APIModel


def _clean_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class SignupRequest(APIModel):
    """Request model for user registration."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _clean_email(value)


class LoginRequest(APIModel):
    """Request model for user login.

    Email format is not checked here: a malformed email is simply an
    unknown one and gets the same 401 as a wrong password.
    """

    email: str = Field(..., min_length=1, description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class ProfileUpdateRequest(APIModel):
    """Request model for profile updates; omitted fields are left unchanged."""

    name: str | None = Field(None, max_length=255, description="New display name")
    email: EmailStr | None = Field(None, description="New email address")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return _clean_email(value)


class UserResponse(APIModel):
    """Public user projection (never includes the password hash)."""

    id: UUID
    name: str
    email: str
    created_at: datetime


class AuthResponse(APIModel):
    """Response model for signup and login."""

    message: str
    token: str = Field(..., description="Bearer token")
    user: UserResponse


class CurrentUserResponse(APIModel):
    """Response model for the authenticated user."""

    user: UserResponse


class ProfileResponse(APIModel):
    """Response model for profile updates."""

    message: str
    user: UserResponse

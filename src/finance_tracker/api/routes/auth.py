"""Authentication endpoints for signup, login and profile management.

There is no logout endpoint: tokens are stateless, so logging out means the
client discards its token. An issued token stays valid until it expires.
"""

from fastapi import APIRouter, Depends, status

from finance_tracker.api.deps import get_auth_service, get_current_user
from finance_tracker.models.user import User
from finance_tracker.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    SignupRequest,
    UserResponse,
)
from finance_tracker.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account and return a bearer token.",
)
async def signup(
    data: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a new user account.

    Raises:
        400: Missing fields, invalid email, short password, or email already registered
    """
    token, user = await auth_service.signup(
        name=data.name,
        email=data.email,
        password=data.password,
    )
    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate with email and password to receive a bearer token.",
)
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Authenticate user and return a bearer token.

    Raises:
        401: Invalid credentials (same response for unknown email and wrong password)
    """
    token, user = await auth_service.login(email=data.email, password=data.password)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Get the authenticated user's profile information.",
)
async def get_me(
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    return CurrentUserResponse(user=UserResponse.model_validate(current_user))


@router.put(
    "/profile",
    response_model=ProfileResponse,
    summary="Update profile",
    description="Change the authenticated user's name and/or email.",
)
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    """
    Update name and/or email.

    Raises:
        400: Email already used by another account
        401: Invalid or missing authorization token
    """
    user = await auth_service.update_profile(
        current_user, name=data.name, email=data.email
    )
    return ProfileResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user),
    )

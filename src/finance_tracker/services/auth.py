"""Authentication service with business logic."""

import logging

from finance_tracker.core.exceptions import ConflictError, UnauthenticatedError
from finance_tracker.core.security import (
    TokenService,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from finance_tracker.models.user import User
from finance_tracker.repositories.user import UserRepository, normalize_email

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_repo: UserRepository, token_service: TokenService):
        """
        Initialize authentication service.

        Args:
            user_repo: User repository for database operations
            token_service: Issues bearer tokens for authenticated users
        """
        self.user_repo = user_repo
        self.token_service = token_service

    async def signup(self, name: str, email: str, password: str) -> tuple[str, User]:
        """
        Register a new user and sign them in.

        Args:
            name: Display name
            email: User email address (normalized before storage)
            password: Plain text password

        Returns:
            Bearer token and the created user

        Raises:
            ConflictError: If email already exists
        """
        email = normalize_email(email)
        if await self.user_repo.email_exists(email):
            raise ConflictError(error_code="AUTH_003")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
        )
        created_user = await self.user_repo.create(user)
        logger.info("User signed up", extra={"user_id": created_user.id})

        return self.token_service.issue(created_user.id), created_user

    async def login(self, email: str, password: str) -> tuple[str, User]:
        """
        Authenticate user and return a bearer token.

        Unknown email and wrong password raise the same error so responses
        cannot be used to probe which emails are registered.

        Args:
            email: User email address
            password: Plain text password

        Returns:
            Bearer token and the authenticated user

        Raises:
            UnauthenticatedError: If credentials are invalid
        """
        user = await self.user_repo.get_by_email(email)
        password_hash = user.password_hash if user is not None else dummy_password_hash()
        verified = verify_password(password, password_hash)
        if user is None or not verified:
            logger.warning("Failed login attempt")
            raise UnauthenticatedError(error_code="AUTH_002")

        logger.info("User logged in", extra={"user_id": user.id})
        return self.token_service.issue(user.id), user

    async def update_profile(
        self, user: User, name: str | None = None, email: str | None = None
    ) -> User:
        """
        Update the caller's name and/or email.

        Args:
            user: Authenticated user
            name: New display name (ignored when empty)
            email: New email address (ignored when empty)

        Returns:
            Updated user

        Raises:
            ConflictError: If the email belongs to another user
        """
        if name and name.strip():
            user.name = name.strip()

        if email and email.strip():
            email = normalize_email(email)
            if email != user.email:
                if await self.user_repo.email_exists(email, exclude_user_id=user.id):
                    raise ConflictError(error_code="AUTH_003")
                user.email = email

        updated_user = await self.user_repo.save(user)
        logger.info("User profile updated", extra={"user_id": updated_user.id})
        return updated_user

"""FastAPI dependency injection for authentication and database."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.config import settings
from finance_tracker.core.exceptions import UnauthenticatedError
from finance_tracker.core.security import InvalidTokenError, TokenService
from finance_tracker.db.session import get_db
from finance_tracker.models.user import User
from finance_tracker.repositories.user import UserRepository
from finance_tracker.services.auth import AuthService
from finance_tracker.services.transaction import TransactionService

# Bearer token scheme; missing headers are handled by the gate itself so the
# response is always our 401 envelope.
security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_service() -> TokenService:
    """
    Build the token service from settings.

    Returns:
        TokenService configured with the server secret and lifetime
    """
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(days=settings.jwt_expire_days),
    )


async def get_user_repository(
    db: AsyncSession = Depends(get_db),
) -> UserRepository:
    return UserRepository(db)


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(user_repo, token_service)


async def get_transaction_service(
    db: AsyncSession = Depends(get_db),
) -> TransactionService:
    return TransactionService(db)


async def _resolve_user(
    credentials: HTTPAuthorizationCredentials | None,
    user_repo: UserRepository,
    token_service: TokenService,
) -> User | None:
    if credentials is None or not credentials.credentials:
        return None
    try:
        user_id = token_service.verify(credentials.credentials)
    except InvalidTokenError:
        return None
    return await user_repo.get_by_id(user_id)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
) -> User:
    """
    Resolve the bearer token to a user or reject the request.

    Args:
        request: Incoming request; the user is attached to ``request.state``
        credentials: HTTP bearer token credentials
        user_repo: User repository for database queries
        token_service: Verifies the token

    Returns:
        Authenticated user object

    Raises:
        UnauthenticatedError: If the token is missing, invalid, expired, or
            names a user that no longer exists
    """
    user = await _resolve_user(credentials, user_repo, token_service)
    if user is None:
        raise UnauthenticatedError(error_code="AUTH_001")

    request.state.user = user
    return user


async def get_optional_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
) -> User | None:
    """Like get_current_user, but anonymous callers get ``None`` instead of a 401."""
    user = await _resolve_user(credentials, user_repo, token_service)
    if user is not None:
        request.state.user = user
    return user

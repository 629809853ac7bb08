"""User repository for credential lookups."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.models.user import User
from finance_tracker.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    """Trim and lower-case an email so lookups are case-insensitive."""
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Repository for User model with authentication queries."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by email address (used for login)."""
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str, exclude_user_id: UUID | None = None) -> bool:
        """Check if email is already registered, optionally ignoring one user."""
        query = select(User.id).where(User.email == normalize_email(email))
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await self.db.execute(query)
        return result.first() is not None

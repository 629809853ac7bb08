"""Base repository with generic CRUD operations."""
import logging
from typing import Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.core.exceptions import InternalError
from finance_tracker.models.base import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic repository providing CRUD operations for any model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def _commit(self) -> None:
        """Commit the session, rolling back on failure.

        Integrity errors propagate unchanged for the API error handler; any
        other store failure becomes an InternalError.
        """
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(
                "Database commit failed",
                extra={"error_type": type(exc).__name__},
                exc_info=exc,
            )
            raise InternalError(error_code="DB_001") from exc

    async def get_by_id(self, id: UUID) -> T | None:
        """Get a single record by ID."""
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def create(self, obj: T) -> T:
        """Create a new record."""
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def save(self, obj: T) -> T:
        """Persist changes made to an already-loaded record."""
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: T) -> None:
        """Permanently delete a loaded record."""
        await self.db.delete(obj)
        await self._commit()

"""Transaction repository with owner-scoped filtering queries."""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.models.transaction import Transaction
from finance_tracker.repositories.base import BaseRepository


@dataclass(frozen=True)
class TransactionFilter:
    """Filter criteria for transaction queries.

    ``None`` means "no constraint". Date bounds are inclusive.
    """

    category: str | None = None
    type: str | None = None
    start: datetime | None = None
    end: datetime | None = None


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model.

    Every query method takes the owner's id and includes it in the predicate,
    so there is no way to reach another user's rows through this class.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    def _owner_query(self, user_id: UUID, filters: TransactionFilter | None = None) -> Select:
        query = select(Transaction).where(Transaction.user_id == user_id)
        if filters is None:
            return query

        if filters.category is not None:
            query = query.where(Transaction.category == filters.category)

        if filters.type is not None:
            query = query.where(Transaction.type == filters.type)

        if filters.start is not None:
            query = query.where(Transaction.date >= filters.start)

        if filters.end is not None:
            query = query.where(Transaction.date <= filters.end)

        return query

    async def get_by_user(self, user_id: UUID, transaction_id: UUID) -> Transaction | None:
        """Get transaction only if it belongs to the specified user."""
        result = await self.db.execute(
            self._owner_query(user_id).where(Transaction.id == transaction_id)
        )
        return result.scalar_one_or_none()

    async def find_matching(
        self,
        user_id: UUID,
        filters: TransactionFilter | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Transaction]:
        """
        Get a user's transactions matching the filter, newest first.

        Ties on ``date`` are broken by ``created_at`` so the most recently
        entered of same-date transactions comes first. With ``limit=None``
        the full matching set is returned.
        """
        query = self._owner_query(user_id, filters).order_by(
            Transaction.date.desc(), Transaction.created_at.desc()
        )
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

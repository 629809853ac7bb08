"""Transaction service: owner-scoped CRUD plus the query/summary engine."""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from finance_tracker.core.exceptions import NotFoundError, ValidationError
from finance_tracker.core.taxonomy import (
    ALL,
    CATEGORIES,
    TRANSACTION_TYPES,
    Category,
    derive_type,
    is_valid_category,
)
from finance_tracker.models.transaction import TITLE_MAX_LENGTH, Transaction
from finance_tracker.repositories.transaction import TransactionFilter, TransactionRepository
from finance_tracker.services.summary import Statistics, Summary, compute_statistics, summarize

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Numeric(12, 2) holds at most 10 integer digits.
MAX_ABS_AMOUNT = Decimal("9999999999.99")

_UPDATABLE_FIELDS = ("title", "amount", "date", "category")


@dataclass
class TransactionPage:
    """One page of a filtered transaction query plus totals over the whole filter."""

    page: int
    page_size: int
    total_pages: int
    total_count: int
    items: list[Transaction]
    summary: Summary


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_bound(value: date | datetime | None) -> datetime | None:
    """Inclusive lower bound; a calendar date means the start of that day."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def end_bound(value: date | datetime | None) -> datetime | None:
    """Inclusive upper bound; a calendar date means the end of that day."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    return datetime.combine(value, time.max, tzinfo=timezone.utc)


def build_filter(
    category: str | None = None,
    type: str | None = None,
    start_date: date | datetime | None = None,
    end_date: date | datetime | None = None,
) -> TransactionFilter:
    """
    Turn raw filter values into a TransactionFilter.

    ``"all"`` and empty values mean no constraint.

    Raises:
        ValidationError: Unknown category or type, or start after end
    """
    errors: dict[str, str] = {}

    if category in (None, "", ALL):
        category = None
    elif not is_valid_category(category):
        errors["category"] = f"Category must be one of: {', '.join(c.value for c in Category)}"

    if type in (None, "", ALL):
        type = None
    elif type not in TRANSACTION_TYPES:
        errors["type"] = "Type must be 'income', 'expense' or 'all'"

    start = start_bound(start_date)
    end = end_bound(end_date)
    if start is not None and end is not None and start > end:
        errors["startDate"] = "Start date must not be after end date"

    if errors:
        raise ValidationError(errors)

    return TransactionFilter(category=category, type=type, start=start, end=end)


def validate_transaction_fields(
    title: str | None,
    amount: Decimal | None,
    category: str | None,
    txn_date: datetime | None,
) -> dict[str, str]:
    """
    Check a fully merged transaction against the data model.

    Returns:
        Mapping of field name to message; empty when the record is valid
    """
    errors: dict[str, str] = {}

    if title is None or not title.strip():
        errors["title"] = "Title is required"
    elif len(title.strip()) > TITLE_MAX_LENGTH:
        errors["title"] = f"Title cannot be more than {TITLE_MAX_LENGTH} characters"

    if amount is None:
        errors["amount"] = "Amount is required"
    elif amount == 0:
        errors["amount"] = "Amount cannot be zero"
    elif abs(amount) > MAX_ABS_AMOUNT:
        errors["amount"] = "Amount is out of range"

    if category is None or not str(category).strip():
        errors["category"] = "Category is required"
    elif category not in CATEGORIES:
        errors["category"] = f"Category must be one of: {', '.join(c.value for c in Category)}"

    if txn_date is None:
        errors["date"] = "Date is required"

    return errors


def _parse_id(transaction_id: UUID | str) -> UUID:
    if isinstance(transaction_id, UUID):
        return transaction_id
    try:
        return UUID(str(transaction_id))
    except ValueError:
        # A malformed id is reported exactly like a missing record.
        raise NotFoundError(details={"transaction_id": str(transaction_id)})


class TransactionService:
    """Service layer for transaction operations.

    Every method takes the caller's user id; records owned by other users are
    reported as not found.
    """

    def __init__(self, db: AsyncSession):
        """Initialize transaction service with database session.

        Args:
            db: Database session
        """
        self.db = db
        self.transaction_repo = TransactionRepository(db)

    async def list_transactions(
        self,
        owner_id: UUID,
        filters: TransactionFilter | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TransactionPage:
        """
        Query a page of the owner's transactions with totals over the filter.

        The summary is computed from the full filtered set, not the page and
        not the user's whole history.

        Args:
            owner_id: Authenticated user ID
            filters: Category/type/date constraints
            page: Page number (1-indexed)
            page_size: Items per page, clamped to MAX_PAGE_SIZE

        Returns:
            TransactionPage with items sorted by date then entry time, newest first

        Raises:
            ValidationError: If page or page_size is below 1
        """
        errors = {}
        if page < 1:
            errors["page"] = "Page must be 1 or greater"
        if page_size < 1:
            errors["limit"] = "Limit must be 1 or greater"
        if errors:
            raise ValidationError(errors)

        # Oversized pages are clamped rather than rejected.
        page_size = min(page_size, MAX_PAGE_SIZE)
        filters = filters or TransactionFilter()

        matching = await self.transaction_repo.find_matching(owner_id, filters)
        summary = summarize(matching)
        total_count = len(matching)

        items = await self.transaction_repo.find_matching(
            owner_id, filters, skip=(page - 1) * page_size, limit=page_size
        )

        return TransactionPage(
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total_count / page_size),
            total_count=total_count,
            items=items,
            summary=summary,
        )

    async def get_transaction(self, owner_id: UUID, transaction_id: UUID | str) -> Transaction:
        """
        Get a single transaction owned by the caller.

        Raises:
            NotFoundError: Absent, owned by another user, or malformed id
        """
        txn_id = _parse_id(transaction_id)
        txn = await self.transaction_repo.get_by_user(owner_id, txn_id)
        if txn is None:
            raise NotFoundError(details={"transaction_id": str(txn_id)})
        return txn

    async def create_transaction(
        self,
        owner_id: UUID,
        title: str | None,
        amount: Decimal | None,
        category: str | None,
        date: datetime | None = None,
    ) -> Transaction:
        """
        Create a transaction for the caller.

        ``type`` is derived from the amount; ``date`` defaults to now.

        Raises:
            ValidationError: Listing every violated field
        """
        txn_date = to_utc(date) if date is not None else datetime.now(timezone.utc)

        errors = validate_transaction_fields(title, amount, category, txn_date)
        if errors:
            raise ValidationError(errors)

        txn = Transaction(
            user_id=owner_id,
            title=title.strip(),
            amount=amount,
            date=txn_date,
            category=category,
            type=derive_type(amount),
        )
        created = await self.transaction_repo.create(txn)
        logger.info(
            "Transaction created",
            extra={"user_id": owner_id, "transaction_id": created.id},
        )
        return created

    async def update_transaction(
        self,
        owner_id: UUID,
        transaction_id: UUID | str,
        changes: dict[str, Any],
    ) -> Transaction:
        """
        Apply a partial update to a transaction owned by the caller.

        Only keys present in ``changes`` are touched; unknown keys (including
        ``type``) are ignored. The merged record is validated as a whole and
        ``type`` is re-derived from the resulting amount.

        Raises:
            NotFoundError: Absent, owned by another user, or malformed id
            ValidationError: Listing every violated field
        """
        txn = await self.get_transaction(owner_id, transaction_id)

        merged = {name: getattr(txn, name) for name in _UPDATABLE_FIELDS}
        for name in _UPDATABLE_FIELDS:
            if name in changes:
                merged[name] = changes[name]
        if merged["date"] is not None:
            merged["date"] = to_utc(merged["date"])

        errors = validate_transaction_fields(
            merged["title"], merged["amount"], merged["category"], merged["date"]
        )
        if errors:
            raise ValidationError(errors)

        txn.title = merged["title"].strip()
        txn.amount = merged["amount"]
        txn.date = merged["date"]
        txn.category = merged["category"]
        txn.type = derive_type(merged["amount"])

        updated = await self.transaction_repo.save(txn)
        logger.info(
            "Transaction updated",
            extra={"user_id": owner_id, "transaction_id": updated.id},
        )
        return updated

    async def delete_transaction(self, owner_id: UUID, transaction_id: UUID | str) -> None:
        """
        Permanently delete a transaction owned by the caller.

        Raises:
            NotFoundError: Absent, owned by another user, or malformed id
        """
        txn = await self.get_transaction(owner_id, transaction_id)
        await self.transaction_repo.delete(txn)
        logger.info(
            "Transaction deleted",
            extra={"user_id": owner_id, "transaction_id": txn.id},
        )

    async def get_statistics(
        self,
        owner_id: UUID,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
    ) -> Statistics:
        """
        Totals, count and per-category breakdown over the caller's transactions.

        Args:
            owner_id: Authenticated user ID
            start_date: Optional inclusive lower bound
            end_date: Optional inclusive upper bound

        Returns:
            Statistics for the transactions in range
        """
        filters = build_filter(start_date=start_date, end_date=end_date)
        matching = await self.transaction_repo.find_matching(owner_id, filters)
        return compute_statistics(matching)

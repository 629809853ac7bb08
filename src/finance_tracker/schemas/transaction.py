"""Transaction request/response schemas.

Request models only check types; the data model rules (non-empty title,
non-zero amount, known category) are enforced by TransactionService so the
same per-field messages come back whichever caller breaks them.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from finance_tracker.schemas.base import APIModel


class TransactionCreate(APIModel):
    """Request to create a transaction. Any ``type`` sent by the client is ignored."""

    title: str | None = Field(None, description="Short description (max 100 characters)")
    amount: Decimal | None = Field(
        None, decimal_places=2, description="Signed amount: positive income, negative expense"
    )
    date: datetime | None = Field(None, description="Transaction date (defaults to now)")
    category: str | None = Field(None, description="Category from the fixed list")


class TransactionUpdate(APIModel):
    """Partial update; only fields present in the body are changed."""

    title: str | None = None
    amount: Decimal | None = Field(None, decimal_places=2)
    date: datetime | None = None
    category: str | None = None


class TransactionResponse(APIModel):
    """Transaction data for API responses."""

    id: UUID
    user_id: UUID
    title: str
    amount: float
    date: datetime
    category: str
    type: str = Field(description="income or expense, derived from the amount sign")
    created_at: datetime
    updated_at: datetime


class SummaryResponse(APIModel):
    """Totals over every transaction matching the active filter."""

    total_income: float
    total_expenses: float = Field(description="Sum of expense magnitudes (positive)")
    balance: float


class TransactionListResult(APIModel):
    """Paginated list of transactions with filter-wide totals."""

    transactions: list[TransactionResponse]
    current_page: int
    total_pages: int
    total: int
    summary: SummaryResponse


class CategoryStatsResponse(APIModel):
    income: float
    expenses: float
    total: float


class StatisticsResponse(APIModel):
    """Totals and per-category breakdown for a date range."""

    total_income: float
    total_expenses: float
    balance: float
    transaction_count: int
    category_stats: dict[str, CategoryStatsResponse]

"""Transaction model representing a single income or expense entry."""
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_tracker.models.base import BaseModel, utcnow

TITLE_MAX_LENGTH = 100


class Transaction(BaseModel):
    """Owned transaction. Positive amounts are income, negative are expenses."""

    __tablename__ = "transactions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # Always derive_type(amount); written by TransactionService only.
    type: Mapped[str] = mapped_column(String(10), nullable=False)

    __table_args__ = (
        Index("ix_transactions_user_id_date", "user_id", "date"),
    )

    user: Mapped["User"] = relationship("User", back_populates="transactions")

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, amount={self.amount}, type={self.type})>"

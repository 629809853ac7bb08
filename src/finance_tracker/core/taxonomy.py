"""Transaction categories and direction types.

The category list is fixed. Direction is never stored independently of the
amount: ``derive_type`` is the single place that maps a signed amount to
``income`` or ``expense``.
"""

from __future__ import annotations

import enum
from decimal import Decimal

# Query parameter value meaning "no filter" for category and type.
ALL = "all"


class Category(str, enum.Enum):
    FOOD_AND_DINING = "Food & Dining"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS_AND_UTILITIES = "Bills & Utilities"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    INCOME = "Income"
    INVESTMENT = "Investment"
    OTHER = "Other"


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


CATEGORIES: frozenset[str] = frozenset(c.value for c in Category)
TRANSACTION_TYPES: frozenset[str] = frozenset(t.value for t in TransactionType)


def derive_type(amount: Decimal | int | float) -> str:
    """Map a signed amount to its direction: positive is income, anything else expense."""
    return TransactionType.INCOME.value if amount > 0 else TransactionType.EXPENSE.value


def is_valid_category(category: str | None) -> bool:
    return category in CATEGORIES

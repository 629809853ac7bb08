"""Aggregate totals over a set of transactions.

These are pure functions over anything exposing ``amount`` (and ``category``
for the breakdown), so the numbers always describe exactly the rows that were
passed in. Totals use Decimal arithmetic end to end.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Protocol

ZERO = Decimal("0")


class HasAmount(Protocol):
    amount: Decimal


class HasAmountAndCategory(HasAmount, Protocol):
    category: str


@dataclass
class Summary:
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses


@dataclass
class CategoryTotals:
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    # Signed sum: income minus expenses within the category.
    total: Decimal = ZERO


@dataclass
class Statistics:
    summary: Summary
    transaction_count: int
    category_stats: dict[str, CategoryTotals] = field(default_factory=dict)


def summarize(transactions: Iterable[HasAmount]) -> Summary:
    """
    Compute income, expense and balance totals.

    Args:
        transactions: Records with a signed ``amount``

    Returns:
        Summary where total_expenses is reported as a positive number
    """
    summary = Summary()
    for txn in transactions:
        amount = Decimal(str(txn.amount))
        if amount > 0:
            summary.total_income += amount
        elif amount < 0:
            summary.total_expenses += -amount
    return summary


def category_breakdown(
    transactions: Iterable[HasAmountAndCategory],
) -> dict[str, CategoryTotals]:
    """Group income, expense and signed totals by category."""
    stats: dict[str, CategoryTotals] = {}
    for txn in transactions:
        amount = Decimal(str(txn.amount))
        totals = stats.setdefault(txn.category, CategoryTotals())
        if amount > 0:
            totals.income += amount
        else:
            totals.expenses += -amount
        totals.total += amount
    return stats


def compute_statistics(transactions: Iterable[HasAmountAndCategory]) -> Statistics:
    """Summary, count and per-category breakdown for the same rows."""
    rows = list(transactions)
    return Statistics(
        summary=summarize(rows),
        transaction_count=len(rows),
        category_stats=category_breakdown(rows),
    )

"""Database models."""
from finance_tracker.models.base import Base
from finance_tracker.models.user import User
from finance_tracker.models.transaction import Transaction

__all__ = ["Base", "User", "Transaction"]

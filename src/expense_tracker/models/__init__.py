"""Database models."""
from expense_tracker.models.user import User, UserRole
from expense_tracker.models.transaction import TaxType, Transaction, TransactionType

__all__ = ["User", "UserRole", "Transaction", "TransactionType", "TaxType"]

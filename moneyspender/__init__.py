"""Core business logic package for the money spender."""

from .calculator import DefaultExpenseCalculator, ExpenseCalculator, total_of
from .exceptions import (
    DuplicateUserError,
    InvalidExpenseError,
    InvalidExpenseKind,
    InvalidRangeError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from .filters import DefaultExpenseFilterer, ExpenseFilterer
from .ledger import Ledger
from .models import Expense
from .repository import UserRepository
from .services import LedgerService
from .storage import JSONStorage
from .user import User

__all__ = [
    "Expense",
    "Ledger",
    "User",
    "LedgerService",
    "ExpenseFilterer",
    "DefaultExpenseFilterer",
    "ExpenseCalculator",
    "DefaultExpenseCalculator",
    "total_of",
    "JSONStorage",
    "UserRepository",
    "DuplicateUserError",
    "InvalidExpenseError",
    "InvalidExpenseKind",
    "InvalidRangeError",
    "PersistenceError",
    "RecordNotFoundError",
    "ValidationError",
]

"""Domain-specific exceptions for the money spender core."""

from __future__ import annotations

from enum import Enum


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class InvalidExpenseKind(str, Enum):
    DATE = "invalid_date"
    PRICE = "invalid_price"
    CATEGORY = "invalid_category"
    DESCRIPTION = "invalid_description"


class InvalidExpenseError(ValidationError):
    """Raised when an expense field fails validation."""

    def __init__(self, kind: InvalidExpenseKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class InvalidRangeError(ValidationError):
    """Raised when a date filter starts after it ends."""


class RecordNotFoundError(LookupError):
    """Raised when an expense or user record cannot be located."""


class DuplicateUserError(ValueError):
    """Raised when registering a username that is already taken."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""

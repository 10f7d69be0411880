"""Data models for the money spender domain."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict

from .validators import (
    format_date,
    parse_date,
    validate_category,
    validate_description,
    validate_price,
)

__all__ = ["Expense"]


@dataclass(frozen=True)
class Expense:
    """A single validated spending record.

    ``date`` accepts a :class:`datetime.date` or a ``dd.MM.yyyy`` string and is
    always stored as a date. Instances are immutable; use :meth:`replace` to
    derive a changed copy, which is validated again.
    """

    date: date
    category: str
    price: float
    description: str

    def __post_init__(self) -> None:
        # Frozen dataclass: normalised values are written through object.__setattr__.
        object.__setattr__(self, "date", parse_date(self.date))
        object.__setattr__(self, "category", validate_category(self.category))
        object.__setattr__(self, "price", validate_price(self.price))
        object.__setattr__(self, "description", validate_description(self.description))

    @property
    def date_string(self) -> str:
        return format_date(self.date)

    def replace(self, **changes: Any) -> "Expense":
        """Return a copy with ``changes`` applied; raises like the constructor."""
        return dataclasses.replace(self, **changes)

    def __str__(self) -> str:
        return f"| {self.date_string} | {self.category} | {self.description} | {self.price:.2f}kr |"

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "date": self.date_string,
            "category": self.category,
            "price": self.price,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data."""
        return cls(
            date=data.get("date"),
            category=data.get("category"),
            price=data.get("price"),
            description=data.get("description"),
        )

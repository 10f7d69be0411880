"""Per-user expense collection with a derived category index."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .models import Expense

logger = logging.getLogger(__name__)


class Ledger:
    """Ordered expenses for one user plus the set of categories they use.

    ``categories()`` always equals ``{e.category for e in list()}`` once any
    public method returns. The index is a plain set, not reference counted,
    so removals rescan the remaining expenses.
    """

    def __init__(self, expenses: Optional[Iterable[Expense]] = None) -> None:
        self._expenses: List[Expense] = list(expenses or [])
        if any(expense is None for expense in self._expenses):
            raise ValidationError("Expense cannot be None.")
        self._categories: Set[str] = set()
        self.rebuild_categories()

    # Public API -----------------------------------------------------------
    def add(self, expense: Expense) -> None:
        if expense is None:
            raise ValidationError("Expense cannot be None.")
        self._expenses.append(expense)
        self._categories.add(expense.category)
        logger.debug("Added expense %s", expense)

    def remove(self, expense: Expense) -> bool:
        """Remove the first value-equal expense; return whether one was removed."""
        index = self._index_of(expense)
        if index is None:
            return False
        removed = self._expenses.pop(index)
        if not self._category_in_use(removed.category):
            self._categories.discard(removed.category)
            logger.debug("Category %s no longer in use", removed.category)
        logger.debug("Removed expense %s", removed)
        return True

    def update(self, old: Expense, new: Expense) -> None:
        """Replace ``old`` with ``new`` at the same position."""
        if new is None:
            raise ValidationError("Expense cannot be None.")
        index = self._index_of(old)
        if index is None:
            raise RecordNotFoundError(f"Expense not found: {old}")

        if old.category != new.category:
            # New category goes in before the old one can leave the index.
            self._categories.add(new.category)
            if not self._category_in_use(old.category, skip_index=index):
                self._categories.discard(old.category)

        self._expenses[index] = new
        logger.debug("Updated expense %s -> %s", old, new)

    def list(self) -> List[Expense]:
        return list(self._expenses)

    def categories(self) -> Set[str]:
        return set(self._categories)

    @property
    def expense_count(self) -> int:
        return len(self._expenses)

    @property
    def category_count(self) -> int:
        return len(self._categories)

    def rebuild_categories(self) -> None:
        """Recompute the category index from the stored expenses."""
        self._categories = {expense.category for expense in self._expenses}

    def __len__(self) -> int:
        return len(self._expenses)

    def __contains__(self, expense: object) -> bool:
        return expense in self._expenses

    def __repr__(self) -> str:
        return f"Ledger(expenses={self.expense_count}, categories={self.category_count})"

    # Serialisation --------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {"expenses": [expense.to_dict() for expense in self._expenses]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ledger":
        raw_expenses = data.get("expenses") or []
        if not isinstance(raw_expenses, list):
            raise PersistenceError("Expected a list of expenses")
        return cls(Expense.from_dict(payload) for payload in raw_expenses)

    # Internal helpers -----------------------------------------------------
    def _index_of(self, expense: Optional[Expense]) -> Optional[int]:
        if expense is None:
            return None
        for index, candidate in enumerate(self._expenses):
            if candidate == expense:
                return index
        return None

    def _category_in_use(self, category: str, *, skip_index: Optional[int] = None) -> bool:
        return any(
            expense.category == category
            for index, expense in enumerate(self._expenses)
            if index != skip_index
        )

"""Framework-agnostic business services for the money spender."""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from .calculator import DefaultExpenseCalculator, ExpenseCalculator
from .exceptions import ValidationError
from .filters import (
    Comparator,
    DateBound,
    DefaultExpenseFilterer,
    ExpenseFilterer,
    SortKey,
    by_price,
)
from .models import Expense
from .user import User

logger = logging.getLogger(__name__)


class LedgerService:
    """Binds a user's ledger to a filtering strategy and a totals strategy."""

    def __init__(
        self,
        filterer: Optional[ExpenseFilterer] = None,
        calculator: Optional[ExpenseCalculator] = None,
    ) -> None:
        self.filterer = filterer if filterer is not None else DefaultExpenseFilterer()
        self.calculator = calculator if calculator is not None else DefaultExpenseCalculator()

    @property
    def filterer(self) -> ExpenseFilterer:
        return self._filterer

    @filterer.setter
    def filterer(self, value: ExpenseFilterer) -> None:
        if value is None:
            raise ValidationError("ExpenseFilterer cannot be None.")
        self._filterer = value

    @property
    def calculator(self) -> ExpenseCalculator:
        return self._calculator

    @calculator.setter
    def calculator(self, value: ExpenseCalculator) -> None:
        if value is None:
            raise ValidationError("ExpenseCalculator cannot be None.")
        self._calculator = value

    # Mutations ------------------------------------------------------------
    def add_for(self, user: User, expense: Expense) -> None:
        user.ledger.add(expense)

    def remove_for(self, user: User, expense: Expense) -> bool:
        removed = user.ledger.remove(expense)
        if not removed:
            logger.warning("No matching expense to remove for %s", user.username)
        return removed

    def update_for(self, user: User, old: Expense, new: Expense) -> None:
        user.ledger.update(old, new)

    # Read paths -----------------------------------------------------------
    def filter_and_sort_for(
        self,
        user: User,
        category: Optional[str] = None,
        start: DateBound = None,
        end: DateBound = None,
    ) -> List[Expense]:
        """The canonical expense view: filtered, most expensive first."""
        filtered = self._filterer.filter_expenses(user.ledger.list(), start, end, category)
        return self._filterer.sort_expenses(filtered, by_price, reverse=True)

    def all_for(self, user: User) -> List[Expense]:
        return user.ledger.list()

    def categories_for(self, user: User) -> Set[str]:
        return user.ledger.categories()

    def total_for(self, user: User) -> float:
        return self.total_of(user.ledger.list())

    def total_of(self, expenses: List[Expense]) -> float:
        return self._calculator.total(expenses)

    def sorted_for(
        self,
        user: User,
        key: Optional[SortKey] = None,
        *,
        reverse: bool = False,
        comparator: Optional[Comparator] = None,
    ) -> List[Expense]:
        return self._filterer.sort_expenses(
            user.ledger.list(), key, reverse=reverse, comparator=comparator
        )

    def find(self, user: User, expense: Expense) -> Optional[Expense]:
        """Return the stored expense equal to ``expense``, or ``None``."""
        for stored in user.ledger.list():
            if stored == expense:
                return stored
        return None

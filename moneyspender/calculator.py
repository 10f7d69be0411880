"""Aggregation over sequences of expenses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from .models import Expense


def total_of(expenses: Iterable[Expense]) -> float:
    # Plain float summation; no rounding policy is applied.
    return sum((expense.price for expense in expenses), 0.0)


class ExpenseCalculator(ABC):
    """Strategy used by the service for totals."""

    @abstractmethod
    def total(self, expenses: Iterable[Expense]) -> float:
        ...


class DefaultExpenseCalculator(ExpenseCalculator):
    def total(self, expenses: Iterable[Expense]) -> float:
        return total_of(expenses)

"""Pure filtering and sorting over sequences of expenses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Optional, Union

from .exceptions import InvalidRangeError
from .models import Expense
from .validators import parse_optional_date

DateBound = Optional[Union[date, str]]
SortKey = Callable[[Expense], Any]
Comparator = Callable[[Expense, Expense], int]


def validate_range(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and start > end:
        raise InvalidRangeError("Start date cannot be after end date.")


def filter_by_date_range(
    expenses: Iterable[Expense], start: DateBound = None, end: DateBound = None
) -> List[Expense]:
    """Keep expenses dated within ``[start, end]``; a missing bound is open."""
    start_date = parse_optional_date(start)
    end_date = parse_optional_date(end)
    validate_range(start_date, end_date)

    def matches(expense: Expense) -> bool:
        if start_date is not None and expense.date < start_date:
            return False
        if end_date is not None and expense.date > end_date:
            return False
        return True

    return [expense for expense in expenses if matches(expense)]


def filter_by_category(
    expenses: Iterable[Expense], category: Optional[str] = None
) -> List[Expense]:
    if category is None or not category.strip():
        return list(expenses)
    return [expense for expense in expenses if expense.category == category]


def filter_expenses(
    expenses: Iterable[Expense],
    start: DateBound = None,
    end: DateBound = None,
    category: Optional[str] = None,
) -> List[Expense]:
    start_date = parse_optional_date(start)
    end_date = parse_optional_date(end)
    # Range errors surface before anything is filtered.
    validate_range(start_date, end_date)
    return filter_by_category(filter_by_date_range(expenses, start_date, end_date), category)


def sort_expenses(
    expenses: Iterable[Expense],
    key: Optional[SortKey] = None,
    *,
    reverse: bool = False,
    comparator: Optional[Comparator] = None,
) -> List[Expense]:
    """Return a new, stably sorted list; pass either ``key`` or ``comparator``."""
    if key is not None and comparator is not None:
        raise TypeError("Pass either key or comparator, not both")
    if comparator is not None:
        key = cmp_to_key(comparator)
    if key is None:
        key = by_date
    return sorted(expenses, key=key, reverse=reverse)


def by_price(expense: Expense) -> float:
    return expense.price


def by_date(expense: Expense) -> date:
    return expense.date


def by_category(expense: Expense) -> str:
    return expense.category


class ExpenseFilterer(ABC):
    """Strategy used by the service for filtering and ordering."""

    @abstractmethod
    def filter_expenses(
        self,
        expenses: Iterable[Expense],
        start: DateBound = None,
        end: DateBound = None,
        category: Optional[str] = None,
    ) -> List[Expense]:
        ...

    @abstractmethod
    def sort_expenses(
        self,
        expenses: Iterable[Expense],
        key: Optional[SortKey] = None,
        *,
        reverse: bool = False,
        comparator: Optional[Comparator] = None,
    ) -> List[Expense]:
        ...


class DefaultExpenseFilterer(ExpenseFilterer):
    def filter_expenses(
        self,
        expenses: Iterable[Expense],
        start: DateBound = None,
        end: DateBound = None,
        category: Optional[str] = None,
    ) -> List[Expense]:
        return filter_expenses(expenses, start, end, category)

    def sort_expenses(
        self,
        expenses: Iterable[Expense],
        key: Optional[SortKey] = None,
        *,
        reverse: bool = False,
        comparator: Optional[Comparator] = None,
    ) -> List[Expense]:
        return sort_expenses(expenses, key, reverse=reverse, comparator=comparator)

from datetime import date

import pytest

from moneyspender.calculator import ExpenseCalculator
from moneyspender.exceptions import InvalidRangeError, RecordNotFoundError, ValidationError
from moneyspender.filters import DefaultExpenseFilterer, by_date
from moneyspender.models import Expense
from moneyspender.services import LedgerService


class FixedCalculator(ExpenseCalculator):
    def total(self, expenses):
        return 42.0


class FoodOnlyFilterer(DefaultExpenseFilterer):
    def filter_expenses(self, expenses, start=None, end=None, category=None):
        return super().filter_expenses(expenses, start, end, "Food")


@pytest.fixture
def service():
    return LedgerService()


def test_add_and_remove_for(service, user):
    extra = Expense("03.03.2024", "Gifts", 5.0, "Card")
    service.add_for(user, extra)
    assert extra in service.all_for(user)
    assert "Gifts" in service.categories_for(user)
    assert service.remove_for(user, extra) is True
    assert extra not in service.all_for(user)
    assert "Gifts" not in service.categories_for(user)


def test_remove_for_missing_returns_false(service, user, food_a):
    assert service.remove_for(user, food_a.replace(price=1.0)) is False


def test_update_for_moves_category(service, user, travel):
    service.update_for(user, travel, travel.replace(category="Holiday"))
    assert service.categories_for(user) == {"Food", "Holiday"}
    with pytest.raises(RecordNotFoundError):
        service.update_for(user, travel, travel.replace(category="Gifts"))


def test_filter_and_sort_for_most_expensive_first(service, user):
    result = service.filter_and_sort_for(user)
    assert [expense.price for expense in result] == [300.0, 20.0, 10.0]


def test_filter_and_sort_for_with_criteria(service, user):
    result = service.filter_and_sort_for(user, "Food", date(2024, 1, 1), date(2024, 1, 31))
    assert [expense.description for expense in result] == ["b", "a"]
    assert service.filter_and_sort_for(user, start="02.01.2024", end="02.01.2024")[0].description == "b"


def test_filter_and_sort_for_invalid_range(service, user):
    with pytest.raises(InvalidRangeError):
        service.filter_and_sort_for(user, None, date(2024, 2, 1), date(2024, 1, 1))


def test_totals(service, user):
    assert service.total_for(user) == 330.0
    assert service.total_of([]) == 0


def test_sorted_for(service, user, food_a, food_b, travel):
    assert service.sorted_for(user, by_date, reverse=True) == [travel, food_b, food_a]
    assert service.sorted_for(user, comparator=lambda a, b: 0) == [food_a, food_b, travel]


def test_find_returns_stored_instance(service, user, food_b):
    probe = Expense("02.01.2024", "Food", 20, "b")
    found = service.find(user, probe)
    assert found == food_b
    assert found is food_b
    assert service.find(user, probe.replace(description="zzz")) is None


def test_all_for_returns_copy(service, user):
    service.all_for(user).clear()
    assert user.ledger.expense_count == 3


def test_pluggable_strategies(user):
    service = LedgerService(FoodOnlyFilterer(), FixedCalculator())
    assert {expense.category for expense in service.filter_and_sort_for(user)} == {"Food"}
    assert service.total_for(user) == 42.0


def test_strategies_cannot_be_none():
    service = LedgerService()
    with pytest.raises(ValidationError):
        service.filterer = None
    with pytest.raises(ValidationError):
        service.calculator = None

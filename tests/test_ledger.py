import random

import pytest

from moneyspender.exceptions import RecordNotFoundError, ValidationError
from moneyspender.ledger import Ledger
from moneyspender.models import Expense


def assert_index_consistent(ledger):
    assert ledger.categories() == {expense.category for expense in ledger.list()}


def test_empty_ledger():
    ledger = Ledger()
    assert ledger.list() == []
    assert ledger.categories() == set()
    assert ledger.expense_count == 0
    assert ledger.category_count == 0


def test_initial_expenses_derive_categories(ledger, food_a, food_b, travel):
    assert ledger.list() == [food_a, food_b, travel]
    assert ledger.categories() == {"Food", "Travel"}
    assert ledger.expense_count == 3
    assert ledger.category_count == 2
    assert len(ledger) == 3


def test_add_appends_and_indexes(food_a):
    ledger = Ledger()
    ledger.add(food_a)
    assert ledger.list() == [food_a]
    assert ledger.categories() == {"Food"}
    ledger.add(food_a)
    assert ledger.expense_count == 2
    assert ledger.category_count == 1


def test_add_none_rejected():
    ledger = Ledger()
    with pytest.raises(ValidationError):
        ledger.add(None)
    assert ledger.list() == []


def test_accessors_return_copies(ledger):
    ledger.list().clear()
    ledger.categories().clear()
    assert ledger.expense_count == 3
    assert ledger.category_count == 2


def test_remove_keeps_category_still_in_use(food_a, food_b):
    ledger = Ledger([food_a, food_b])
    assert ledger.remove(food_a) is True
    assert ledger.categories() == {"Food"}
    assert ledger.remove(food_b) is True
    assert ledger.categories() == set()
    assert ledger.list() == []


def test_remove_missing_returns_false(ledger, food_a):
    assert ledger.remove(food_a.replace(description="other")) is False
    assert ledger.remove(None) is False
    assert ledger.expense_count == 3


def test_remove_first_duplicate_only(food_a):
    ledger = Ledger([food_a, food_a])
    assert ledger.remove(food_a) is True
    assert ledger.list() == [food_a]
    # The remaining duplicate still uses the category.
    assert ledger.categories() == {"Food"}
    assert food_a in ledger


def test_update_moves_category(food_a):
    new = food_a.replace(category="Travel")
    ledger = Ledger([food_a])
    ledger.update(food_a, new)
    assert ledger.list() == [new]
    assert ledger.categories() == {"Travel"}


def test_update_keeps_shared_category(food_a, food_b):
    ledger = Ledger([food_a, food_b])
    ledger.update(food_a, food_a.replace(category="Travel"))
    assert ledger.categories() == {"Food", "Travel"}


def test_update_preserves_position(food_a, food_b, travel):
    ledger = Ledger([food_a, food_b, travel])
    new = food_b.replace(price=25.0)
    ledger.update(food_b, new)
    assert ledger.list() == [food_a, new, travel]


def test_update_with_duplicate_of_old_keeps_category(food_a):
    ledger = Ledger([food_a, food_a])
    ledger.update(food_a, food_a.replace(category="Travel"))
    assert ledger.categories() == {"Food", "Travel"}
    assert [expense.category for expense in ledger.list()] == ["Travel", "Food"]


def test_update_missing_raises_without_changes(ledger, food_a):
    before_list = ledger.list()
    before_categories = ledger.categories()
    with pytest.raises(RecordNotFoundError):
        ledger.update(food_a.replace(description="ghost"), food_a.replace(category="Gifts"))
    assert ledger.list() == before_list
    assert ledger.categories() == before_categories


def test_update_to_none_rejected(ledger, food_a):
    with pytest.raises(ValidationError):
        ledger.update(food_a, None)
    assert ledger.list()[0] == food_a


def test_rebuild_categories(ledger):
    ledger._categories.add("Stale")
    ledger.rebuild_categories()
    assert_index_consistent(ledger)


def test_to_dict_and_from_dict(ledger):
    payload = ledger.to_dict()
    assert set(payload) == {"expenses"}
    restored = Ledger.from_dict(payload)
    assert restored.list() == ledger.list()
    assert restored.categories() == ledger.categories()


def test_index_consistent_after_random_operations():
    rng = random.Random(1234)
    categories = ["Food", "Travel", "Rent", "Gifts"]
    pool = [
        Expense(f"{day:02d}.01.2024", rng.choice(categories), float(day), f"item{day % 4}")
        for day in range(1, 29)
    ]
    ledger = Ledger()
    for _ in range(300):
        operation = rng.choice(["add", "remove", "update"])
        if operation == "add":
            ledger.add(rng.choice(pool))
        elif operation == "remove":
            ledger.remove(rng.choice(pool))
        elif ledger.list():
            old = rng.choice(ledger.list())
            ledger.update(old, old.replace(category=rng.choice(categories)))
        assert_index_consistent(ledger)

import pytest

from api.app import create_app
from moneyspender.ledger import Ledger
from moneyspender.models import Expense
from moneyspender.repository import UserRepository
from moneyspender.storage import JSONStorage
from moneyspender.user import User


@pytest.fixture
def food_a():
    return Expense("01.01.2024", "Food", 10.0, "a")


@pytest.fixture
def food_b():
    return Expense("02.01.2024", "Food", 20.0, "b")


@pytest.fixture
def travel():
    return Expense("15.02.2024", "Travel", 300.0, "Train")


@pytest.fixture
def ledger(food_a, food_b, travel):
    return Ledger([food_a, food_b, travel])


@pytest.fixture
def user(food_a, food_b, travel):
    return User.with_expenses("alice", "secret", [food_a, food_b, travel])


@pytest.fixture
def repository(tmp_path):
    return UserRepository(JSONStorage(tmp_path))


@pytest.fixture
def app(tmp_path):
    app = create_app(tmp_path)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()

"""Flask REST API exposing the money spender services."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, jsonify, request
from flask_cors import CORS

from moneyspender.exceptions import (
    DuplicateUserError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from moneyspender.models import Expense
from moneyspender.repository import UserRepository
from moneyspender.services import LedgerService
from moneyspender.storage import JSONStorage
from moneyspender.validators import parse_optional_date

PRICE_PATTERN = re.compile(r"[0-9]+(\.[0-9]{1,2})?")


class PriceFormatError(ValidationError):
    """Raised when a submitted price string is not a plain decimal amount."""


def choose_category(new_category: Optional[str], dropdown_category: Optional[str]) -> str:
    """Pick the category from exactly one of the two form inputs."""
    has_new = bool(new_category)
    has_dropdown = bool(dropdown_category)
    if not has_new and not has_dropdown:
        raise ValidationError("Please provide a category.")
    if has_new and has_dropdown:
        raise ValidationError(
            "You cannot choose from the dropdown and write a new category at the same time!"
        )
    return new_category if has_new else dropdown_category


def convert_price(raw: object) -> float:
    if raw is None or not str(raw).strip():
        raise ValidationError("Please provide a price.")
    price = str(raw).strip()
    if not PRICE_PATTERN.fullmatch(price):
        raise PriceFormatError("Please provide a valid price.")
    return float(price)


def _configure_cors(app: Flask) -> None:
    env_name = os.getenv("MONEY_SPENDER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
        return
    allowed_origins = os.getenv("MONEY_SPENDER_ALLOWED_ORIGINS")
    if allowed_origins:
        origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
        CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
    else:
        CORS(app)


def create_app(data_dir: Optional[Path] = None, users_file: Optional[str] = None) -> Flask:
    app = Flask(__name__)
    _configure_cors(app)

    data_path = Path(data_dir or os.getenv("MONEY_SPENDER_DATA_DIR", "data"))
    resource = users_file or os.getenv("MONEY_SPENDER_USERS_FILE", "users.json")
    storage = JSONStorage(data_path)
    users = UserRepository(storage, resource)
    service = LedgerService()

    api = Blueprint("moneyspender", __name__, url_prefix="/moneyspender")

    def _success(payload: Any, status: int = 200):
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(PriceFormatError)
    def handle_price_format_error(exc: PriceFormatError):
        return _handle_error(exc, 406, "Invalid price format")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(DuplicateUserError)
    def handle_duplicate_user(exc: DuplicateUserError):
        return _handle_error(exc, 409, "User already exists")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _expense_from(payload: object) -> Expense:
        if not isinstance(payload, dict):
            raise ValidationError("Expense must be a JSON object")
        return Expense.from_dict(payload)

    def _filter_args() -> Dict[str, Any]:
        category = request.args.get("category") or None
        return {
            "category": category,
            "start": parse_optional_date(request.args.get("start") or None),
            "end": parse_optional_date(request.args.get("end") or None),
        }

    @api.post("/user/create")
    def create_user():
        payload = _json_body()
        user = users.create(payload.get("username"), payload.get("password"))
        return _success(user.to_public_dict(), 201)

    @api.post("/user/authenticate")
    def authenticate_user():
        payload = _json_body()
        user = users.authenticate(payload.get("username"), payload.get("password"))
        if user is None:
            return jsonify({"error": "Invalid username or password"}), 401
        return _success(user.to_public_dict())

    @api.get("/user/<username>")
    def get_user(username: str):
        return _success(users.get(username).to_public_dict())

    @api.get("/expense/<username>")
    def list_expenses(username: str):
        user = users.get(username)
        return _success([expense.to_dict() for expense in service.all_for(user)])

    @api.post("/expense/add/<username>")
    def add_expense(username: str):
        user = users.get(username)
        payload = _json_body()
        category = choose_category(payload.get("newCategory"), payload.get("dropDownCategory"))
        expense = Expense(
            date=payload.get("date"),
            category=category,
            price=convert_price(payload.get("price")),
            description=payload.get("description"),
        )
        service.add_for(user, expense)
        users.save(user)
        return _success(user.to_public_dict(), 201)

    @api.put("/expense/update/<username>")
    def update_expense(username: str):
        user = users.get(username)
        payload = _json_body()
        old = _expense_from(payload.get("old"))
        new = _expense_from(payload.get("new"))
        service.update_for(user, old, new)
        users.save(user)
        return _success(user.to_public_dict())

    @api.delete("/expense/delete/<username>")
    def delete_expense(username: str):
        user = users.get(username)
        expense = _expense_from(_json_body())
        stored = service.find(user, expense)
        if stored is None:
            raise RecordNotFoundError(f"Expense not found: {expense}")
        service.remove_for(user, stored)
        users.save(user)
        return _success(user.to_public_dict())

    @api.get("/expense/category/<username>")
    def list_categories(username: str):
        user = users.get(username)
        return _success(sorted(service.categories_for(user)))

    @api.get("/expense/filter/<username>")
    def filter_expenses(username: str):
        user = users.get(username)
        expenses = service.filter_and_sort_for(user, **_filter_args())
        return _success([expense.to_dict() for expense in expenses])

    @api.get("/expense/response/<username>")
    def filter_expenses_with_total(username: str):
        user = users.get(username)
        expenses = service.filter_and_sort_for(user, **_filter_args())
        return _success({
            "expenses": [expense.to_dict() for expense in expenses],
            "total": service.total_of(expenses),
        })

    app.register_blueprint(api)
    return app

"""Console interface for the money spender."""

from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from pathlib import Path
from typing import Iterable, List, Optional

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
from moneyspender.user import User
from moneyspender.validators import parse_date


class AuthenticationError(Exception):
    """Raised when the supplied credentials do not match a stored user."""


def _parse_date(value: str) -> str:
    try:
        parse_date(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format dd.MM.yyyy."
        ) from exc
    return value


def _parse_price(value: str) -> float:
    try:
        price = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Price must be a numeric value") from exc
    if not math.isfinite(price):
        raise argparse.ArgumentTypeError("Price must be a finite number")
    if price < 0:
        raise argparse.ArgumentTypeError("Price cannot be negative")
    return price


def _default_data_dir() -> Path:
    return Path(os.getenv("MONEY_SPENDER_DATA_DIR", "data"))


def _load_repository(data_dir: Path) -> UserRepository:
    return UserRepository(JSONStorage(data_dir), os.getenv("MONEY_SPENDER_USERS_FILE", "users.json"))


def _login(users: UserRepository, username: str, password: str) -> User:
    user = users.authenticate(username, password)
    if user is None:
        raise AuthenticationError("Invalid username or password")
    return user


def _print_expenses(expenses: Iterable[Expense], total: float) -> None:
    expenses = list(expenses)
    if not expenses:
        print("No expenses found.")
        return
    print(f"Found {len(expenses)} expenses (total {total:.2f}kr):")
    for expense in expenses:
        print(expense)


def _expense_from_args(args: argparse.Namespace) -> Expense:
    return Expense(args.date, args.category, args.price, args.description)


def handle_user(args: argparse.Namespace, users: UserRepository) -> None:
    if args.command == "create":
        user = users.create(args.username, args.password)
        print(f"User {user.username} created.")


def handle_expense(args: argparse.Namespace, users: UserRepository, service: LedgerService) -> None:
    user = _login(users, args.username, args.password)
    if args.command == "add":
        expense = _expense_from_args(args)
        service.add_for(user, expense)
        users.save(user)
        print(f"Expense added:\n{expense}")
    elif args.command == "list":
        expenses = service.filter_and_sort_for(user, args.category, args.start, args.end)
        _print_expenses(expenses, service.total_of(expenses))
    elif args.command == "edit":
        old = _expense_from_args(args)
        changes = {
            "date": args.new_date,
            "category": args.new_category,
            "price": args.new_price,
            "description": args.new_description,
        }
        new = old.replace(**{k: v for k, v in changes.items() if v is not None})
        service.update_for(user, old, new)
        users.save(user)
        print(f"Expense updated:\n{new}")
    elif args.command == "delete":
        expense = _expense_from_args(args)
        stored = service.find(user, expense)
        if stored is None:
            raise RecordNotFoundError(f"Expense not found: {expense}")
        service.remove_for(user, stored)
        users.save(user)
        print(f"Expense deleted:\n{stored}")


def handle_categories(args: argparse.Namespace, users: UserRepository, service: LedgerService) -> None:
    user = _login(users, args.username, args.password)
    categories = sorted(service.categories_for(user))
    if not categories:
        print("No categories yet.")
        return
    for category in categories:
        print(category)


def _add_expense_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("username")
    parser.add_argument("date", type=_parse_date)
    parser.add_argument("category")
    parser.add_argument("price", type=_parse_price)
    parser.add_argument("description")
    parser.add_argument("--password", required=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Money Spender CLI")
    parser.add_argument(
        "--data-dir",
        default=None,
        type=Path,
        help="Directory to store JSON data (default: $MONEY_SPENDER_DATA_DIR or ./data)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    user_parser = subparsers.add_parser("user", help="Manage users")
    user_sub = user_parser.add_subparsers(dest="command", required=True)
    user_create = user_sub.add_parser("create", help="Register a new user")
    user_create.add_argument("username")
    user_create.add_argument("password")

    expense_parser = subparsers.add_parser("expense", help="Manage expenses")
    expense_sub = expense_parser.add_subparsers(dest="command", required=True)

    expense_add = expense_sub.add_parser("add", help="Add a new expense")
    _add_expense_fields(expense_add)

    expense_list = expense_sub.add_parser("list", help="List expenses, most expensive first")
    expense_list.add_argument("username")
    expense_list.add_argument("--password", required=True)
    expense_list.add_argument("--category")
    expense_list.add_argument("--start", type=_parse_date)
    expense_list.add_argument("--end", type=_parse_date)

    expense_edit = expense_sub.add_parser("edit", help="Replace an existing expense")
    _add_expense_fields(expense_edit)
    expense_edit.add_argument("--date", dest="new_date", type=_parse_date)
    expense_edit.add_argument("--category", dest="new_category")
    expense_edit.add_argument("--price", dest="new_price", type=_parse_price)
    expense_edit.add_argument("--description", dest="new_description")

    expense_delete = expense_sub.add_parser("delete", help="Delete an expense")
    _add_expense_fields(expense_delete)

    categories_parser = subparsers.add_parser("categories", help="List categories in use")
    categories_parser.add_argument("username")
    categories_parser.add_argument("--password", required=True)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        users = _load_repository(args.data_dir or _default_data_dir())
        service = LedgerService()
        if args.entity == "user":
            handle_user(args, users)
        elif args.entity == "expense":
            handle_expense(args, users, service)
        elif args.entity == "categories":
            handle_categories(args, users, service)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except (RecordNotFoundError, DuplicateUserError, AuthenticationError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

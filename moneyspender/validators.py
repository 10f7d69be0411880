"""Validation helpers shared across the money spender core."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from .exceptions import InvalidExpenseError, InvalidExpenseKind, ValidationError

DATE_FORMAT = "%d.%m.%Y"
DATE_PATTERN = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")
CATEGORY_PATTERN = re.compile(r"^[a-zA-Z]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z]+$")
USERNAME_MAX_LENGTH = 15


def format_date(value: date) -> str:
    """Render a date in the canonical ``dd.MM.yyyy`` form."""
    return value.strftime(DATE_FORMAT)


def parse_date(value: object) -> date:
    """Strictly parse ``dd.MM.yyyy``; dates pass through, datetimes are truncated."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidExpenseError(InvalidExpenseKind.DATE, "Please provide a date.")
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise InvalidExpenseError(
            InvalidExpenseKind.DATE, "The date format should be 'dd.MM.yyyy'."
        )
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        # Pattern matched but the calendar date does not exist, e.g. 31.02.2024.
        raise InvalidExpenseError(
            InvalidExpenseKind.DATE, "The date format should be 'dd.MM.yyyy'."
        ) from exc


def parse_optional_date(value: object) -> Optional[date]:
    if value is None:
        return None
    return parse_date(value)


def validate_price(raw: object) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise InvalidExpenseError(InvalidExpenseKind.PRICE, "Price must be a number.")
    try:
        price = float(raw)
    except OverflowError as exc:
        raise InvalidExpenseError(InvalidExpenseKind.PRICE, "Price must be a finite number.") from exc
    if not math.isfinite(price):
        raise InvalidExpenseError(InvalidExpenseKind.PRICE, "Price must be a finite number.")
    if price < 0:
        raise InvalidExpenseError(InvalidExpenseKind.PRICE, "Price cannot be negative.")
    # Adding 0.0 turns -0.0 into 0.0.
    return price + 0.0


def validate_category(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidExpenseError(
            InvalidExpenseKind.CATEGORY, "Category cannot be null or empty."
        )
    if not CATEGORY_PATTERN.fullmatch(value):
        raise InvalidExpenseError(
            InvalidExpenseKind.CATEGORY,
            "Category should only contain alphabetic characters.",
        )
    return value


def validate_description(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidExpenseError(
            InvalidExpenseKind.DESCRIPTION, "Description cannot be null or empty."
        )
    return value


def validate_required_str(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    if not value:
        raise ValidationError(f"{field} cannot be empty")
    return value


def validate_username(value: object) -> str:
    username = validate_required_str(value, "username")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"username cannot exceed {USERNAME_MAX_LENGTH} characters"
        )
    if not USERNAME_PATTERN.fullmatch(username):
        raise ValidationError("username should only contain alphabetic characters")
    return username


def validate_password(value: object) -> str:
    return validate_required_str(value, "password")

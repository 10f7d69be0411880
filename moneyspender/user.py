"""User record owning exactly one ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from .ledger import Ledger
from .models import Expense
from .validators import validate_password, validate_username

__all__ = ["User"]


@dataclass(eq=False)
class User:
    username: str
    password: str
    ledger: Ledger = field(default_factory=Ledger)

    def __post_init__(self) -> None:
        self.username = validate_username(self.username)
        self.password = validate_password(self.password)

    @classmethod
    def with_expenses(
        cls, username: str, password: str, expenses: Optional[Iterable[Expense]] = None
    ) -> "User":
        return cls(username=username, password=password, ledger=Ledger(expenses))

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the user for storage, credential included."""
        return {
            "username": self.username,
            "password": self.password,
            "ledger": self.ledger.to_dict(),
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialise the user for API responses, without the credential."""
        return {
            "username": self.username,
            "ledger": self.ledger.to_dict(),
            "categories": sorted(self.ledger.categories()),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            username=data.get("username"),
            password=data.get("password"),
            ledger=Ledger.from_dict(data.get("ledger") or {}),
        )

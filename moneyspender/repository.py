"""User records kept in a JSON resource."""

from __future__ import annotations

import hmac
import logging
from typing import List, Optional

from .exceptions import (
    DuplicateUserError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from .storage import JSONStorage
from .user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Loads and saves users, each with its ledger, through ``JSONStorage``.

    Every call reads the resource afresh so that separate processes (the API
    and the CLI) sharing a data directory see each other's writes.
    """

    def __init__(self, storage: JSONStorage, resource: str = "users.json") -> None:
        self._storage = storage
        self._resource = resource

    def list(self) -> List[User]:
        users = []
        for payload in self._storage.load(self._resource):
            try:
                # Ledger.from_dict rebuilds the category index from the expenses.
                users.append(User.from_dict(payload))
            except (ValidationError, AttributeError, TypeError) as exc:
                raise PersistenceError(f"Invalid user record in {self._resource}: {exc}") from exc
        return users

    def exists(self, username: str) -> bool:
        return self.find(username) is not None

    def find(self, username: str) -> Optional[User]:
        for user in self.list():
            if user.username == username:
                return user
        return None

    def get(self, username: str) -> User:
        user = self.find(username)
        if user is None:
            raise RecordNotFoundError(f"User {username} not found")
        return user

    def save(self, user: User) -> None:
        users = self.list()
        for index, existing in enumerate(users):
            if existing.username == user.username:
                users[index] = user
                break
        else:
            users.append(user)
        self._storage.save(self._resource, [record.to_dict() for record in users])

    def create(self, username: str, password: str) -> User:
        user = User(username=username, password=password)
        if self.exists(user.username):
            raise DuplicateUserError(f"User {user.username} already exists")
        self.save(user)
        logger.info("Created user %s", user.username)
        return user

    def authenticate(self, username: str, password: str) -> Optional[User]:
        if not isinstance(password, str):
            return None
        user = self.find(username)
        if user is None:
            return None
        if not hmac.compare_digest(user.password.encode("utf-8"), password.encode("utf-8")):
            logger.warning("Failed login for %s", username)
            return None
        return user

"""
Pytest fixtures for accounts module tests.

Provides an in-memory stand-in for the ``accounts`` table that enforces the
same email uniqueness and timestamping as the real schema, and a bcrypt
hasher at the minimum cost so the suite stays fast.
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from modules.accounts.exceptions import AccountNotFoundError, DuplicateEmailError
from modules.accounts.hashing import BcryptPasswordHasher
from modules.accounts.models import Account
from modules.accounts.service import AccountService


class InMemoryAccountRepository:
    """IAccountRepository backed by a dict of rows."""

    def __init__(self):
        self.rows: dict[str, dict[str, Any]] = {}
        self.writes: list[tuple[str, dict[str, Any]]] = []
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        # Writes are atomic, as they are in the database.
        self._lock = threading.Lock()

    def _now(self) -> datetime:
        # Strictly increasing so timestamp ordering is observable.
        self._clock += timedelta(seconds=1)
        return self._clock

    def _email_taken(self, email: Optional[str], exclude_id: Optional[str] = None) -> bool:
        return any(
            row["email"] == email and row_id != exclude_id
            for row_id, row in self.rows.items()
        )

    def _map(self, row: dict[str, Any]) -> Account:
        account = Account(**row)
        account.mark_persisted()
        return account

    def insert(self, document: dict[str, Any]) -> Account:
        self.writes.append(("insert", dict(document)))
        with self._lock:
            if self._email_taken(document.get("email")):
                raise DuplicateEmailError(document.get("email"))

            now = self._now()
            row = {
                "roles": ["user"],
                **document,
                "id": str(uuid.uuid4()),
                "created_at": now,
                "updated_at": now,
            }
            self.rows[row["id"]] = row
            return self._map(row)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        row = self.rows.get(account_id)
        return self._map(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        email = email.strip().lower()
        for row in self.rows.values():
            if row["email"] == email:
                return self._map(row)
        return None

    def update(self, account_id: str, changes: dict[str, Any]) -> Account:
        self.writes.append(("update", dict(changes)))
        with self._lock:
            if account_id not in self.rows:
                raise AccountNotFoundError(account_id)
            if "email" in changes and self._email_taken(changes["email"], exclude_id=account_id):
                raise DuplicateEmailError(changes["email"])

            row = self.rows[account_id]
            row.update({k: v for k, v in changes.items() if k not in ("id", "created_at")})
            row["updated_at"] = self._now()
            return self._map(row)


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    """bcrypt hasher at the lowest cost bcrypt accepts."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def service(repository, hasher) -> AccountService:
    return AccountService(repository=repository, hasher=hasher)

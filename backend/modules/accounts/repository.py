"""
Account repository for database access.

Encapsulates all Supabase queries and data mapping for the ``accounts``
table. The repository is the persistence layer's timestamping facility:
``created_at`` is stamped once on insert and ``updated_at`` on every write.
Documents reaching it are expected to have gone through the write pipeline.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.repository import BaseRepository
from .exceptions import AccountNotFoundError, DuplicateEmailError
from .models import Account

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation.
UNIQUE_VIOLATION = "23505"

# Columns that a write must never change.
_IMMUTABLE_COLUMNS = ("id", "created_at")


class AccountRepository(BaseRepository[Account]):
    """
    Repository for account data access.

    All methods return Account models mapped from database rows, with their
    persisted state recorded for change detection on the next save.
    """

    table_name = "accounts"

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, document: dict[str, Any]) -> Account:
        """
        Insert a new account.

        Args:
            document: Writable account fields, password already hashed.

        Returns:
            Created Account with generated ID and timestamps.

        Raises:
            DuplicateEmailError: If an account with this email exists.
        """
        now = _utc_now()
        data = {**document, "created_at": now, "updated_at": now}

        try:
            result = self._table().insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.warning("Rejected duplicate account email on insert")
                raise DuplicateEmailError(document.get("email")) from e
            raise

        return self._map_to_account(result.data[0])

    def update(self, account_id: str, changes: dict[str, Any]) -> Account:
        """
        Write changed fields of an existing account.

        Args:
            account_id: The account UUID.
            changes: Writable fields to overwrite.

        Returns:
            The updated Account.

        Raises:
            AccountNotFoundError: If no account has this ID.
            DuplicateEmailError: If the new email is already taken.
        """
        data = {k: v for k, v in changes.items() if k not in _IMMUTABLE_COLUMNS}
        data["updated_at"] = _utc_now()

        try:
            result = self._table().update(data).eq("id", account_id).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.warning(f"Rejected duplicate account email on update of {account_id}")
                raise DuplicateEmailError(changes.get("email")) from e
            raise

        row = self._first(result)
        if row is None:
            raise AccountNotFoundError(account_id)
        return self._map_to_account(row)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get an account by ID, or None if not found."""
        result = self._table().select("*").eq("id", account_id).execute()
        row = self._first(result)
        return self._map_to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        """Get an account by email. The lookup is case-insensitive."""
        result = self._table().select("*").eq("email", email.strip().lower()).execute()
        row = self._first(result)
        return self._map_to_account(row) if row else None

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _map_to_account(self, data: dict[str, Any]) -> Account:
        """Map database row to Account model."""
        account = Account(
            id=str(data["id"]),
            email=data["email"],
            password=data["password"],
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            roles=data.get("roles"),
            profile_picture=data.get("profile_picture"),
            address=data.get("address"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
        account.mark_persisted()
        return account


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# Module-level instance getter
_repository_instance: Optional[AccountRepository] = None


def get_account_repository(db: Optional[Client] = None) -> AccountRepository:
    """Get the account repository singleton."""
    global _repository_instance
    if _repository_instance is None:
        from shared.config import get_settings
        from shared.database import get_supabase_client

        _repository_instance = AccountRepository(
            db or get_supabase_client(),
            table_name=get_settings().accounts_table,
        )
    return _repository_instance


def reset_account_repository() -> None:
    """Reset the account repository singleton (for testing)."""
    global _repository_instance
    _repository_instance = None

"""
Account service implementation.

Mediates every account write through the pre-write pipeline, so a password
reaches storage only as a bcrypt digest, and verifies candidate passwords
against stored digests.
"""

import asyncio
import logging
from typing import Any, Optional

from .interfaces import IAccountRepository, IAccountService, IPasswordHasher
from .models import Account, AccountCreate, AccountUpdate
from .exceptions import AccountNotFoundError, MalformedDigestError
from .pipeline import WriteContext, WritePipeline, default_pipeline

logger = logging.getLogger(__name__)


class AccountService(IAccountService):
    """
    Account record manager.

    Storage calls are synchronous Supabase requests; they run in a worker
    thread so each write suspends until hashing is done and again until the
    database acknowledges it.
    """

    def __init__(
        self,
        repository: IAccountRepository,
        hasher: IPasswordHasher,
        pipeline: Optional[WritePipeline] = None,
    ):
        self._repository = repository
        self._hasher = hasher
        self._pipeline = pipeline or default_pipeline(hasher)

    async def create_account(self, request: AccountCreate) -> Account:
        """Create an account; its password is always hashed."""
        context = WriteContext(document=request.to_document())
        document = await self._pipeline.run(context)

        account = await asyncio.to_thread(self._repository.insert, document)
        logger.info(f"Created account {account.id}")
        return account

    async def get_account(self, account_id: str) -> Optional[Account]:
        return await asyncio.to_thread(self._repository.get_by_id, account_id)

    async def get_account_by_email(self, email: str) -> Optional[Account]:
        return await asyncio.to_thread(self._repository.get_by_email, email)

    async def update_account(self, account_id: str, request: AccountUpdate) -> Account:
        """Apply the fields set on the request to a stored account."""
        current = await self.get_account(account_id)
        if current is None:
            raise AccountNotFoundError(account_id)

        previous = current.persisted_document()
        context = WriteContext(document={**previous, **request.to_changes()}, previous=previous)
        return await self._write(account_id, context)

    async def save_account(self, account: Account) -> Account:
        """
        Write back a loaded account after in-place changes.

        Only fields that differ from the loaded state are written; an
        untouched password keeps its stored digest.
        """
        previous = account.persisted_document() or None
        context = WriteContext(document=account.to_document(), previous=previous)
        saved = await self._write(account.id, context)

        # Keep the caller's instance in step with storage.
        for name in Account.model_fields:
            setattr(account, name, getattr(saved, name))
        account.mark_persisted()
        return saved

    async def verify_password(self, account: Account, candidate: str) -> bool:
        """Check a plaintext candidate against the account's stored digest."""
        try:
            return await self._hasher.verify(candidate, account.password)
        except MalformedDigestError as e:
            raise MalformedDigestError(account.id) from e

    async def _write(self, account_id: str, context: WriteContext) -> Account:
        document = await self._pipeline.run(context)
        changes = _changed_fields(document, context.previous)

        account = await asyncio.to_thread(self._repository.update, account_id, changes)
        logger.info(f"Updated account {account_id} ({', '.join(sorted(changes)) or 'timestamps only'})")
        return account


def _changed_fields(
    document: dict[str, Any], previous: Optional[dict[str, Any]]
) -> dict[str, Any]:
    if previous is None:
        return dict(document)
    return {k: v for k, v in document.items() if previous.get(k) != v}


# Module-level instance getter
_service_instance: Optional[AccountService] = None


def get_account_service() -> AccountService:
    """
    Get the account service singleton.

    Built once per process; every caller shares the same repository,
    hasher and pipeline.
    """
    global _service_instance
    if _service_instance is None:
        from shared.config import get_settings
        from .hashing import BcryptPasswordHasher
        from .repository import get_account_repository

        settings = get_settings()
        _service_instance = AccountService(
            repository=get_account_repository(),
            hasher=BcryptPasswordHasher(rounds=settings.password_hash_rounds),
        )
    return _service_instance


def reset_account_service() -> None:
    """Reset the account service singleton (for testing)."""
    global _service_instance
    _service_instance = None

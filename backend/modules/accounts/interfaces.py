"""
Accounts module interfaces.

Other modules should depend on IAccountService, not the concrete
implementation. The service itself depends on IPasswordHasher and
IAccountRepository, so either can be replaced in tests.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import Account, AccountCreate, AccountUpdate


@runtime_checkable
class IPasswordHasher(Protocol):
    """
    Salted adaptive hash used for stored passwords.

    All operations are asynchronous; implementations are expected to keep
    the CPU-bound work off the event loop.
    """

    async def generate_salt(self) -> bytes:
        """Generate a fresh random salt at the hasher's cost factor."""
        ...

    async def hash(self, plaintext: str, salt: bytes) -> str:
        """
        Hash a plaintext password with the given salt.

        Returns:
            The digest, with salt and cost embedded.
        """
        ...

    async def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check a plaintext candidate against a stored digest.

        Returns:
            True if the candidate matches, False otherwise

        Raises:
            MalformedDigestError: If digest is not a valid digest
        """
        ...


@runtime_checkable
class IAccountRepository(Protocol):
    """Storage operations for account records."""

    def insert(self, document: dict[str, Any]) -> Account:
        """
        Insert a new account document.

        Raises:
            DuplicateEmailError: If the email is already taken
        """
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get an account by ID, or None if not found."""
        ...

    def get_by_email(self, email: str) -> Optional[Account]:
        """Get an account by email, or None if not found."""
        ...

    def update(self, account_id: str, changes: dict[str, Any]) -> Account:
        """
        Write changed fields of an existing account.

        Raises:
            AccountNotFoundError: If no account has this ID
            DuplicateEmailError: If the new email is already taken
        """
        ...


@runtime_checkable
class IAccountService(Protocol):
    """
    Interface for account record operations.

    This protocol defines the contract that the accounts module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def create_account(self, request: AccountCreate) -> Account:
        """
        Create an account, hashing its password before it is stored.

        Args:
            request: Email, plaintext password and optional profile fields

        Returns:
            The stored Account

        Raises:
            DuplicateEmailError: If the normalized email is already taken
            PasswordHashingError: If hashing fails (nothing is written)
        """
        ...

    async def get_account(self, account_id: str) -> Optional[Account]:
        """Get an account by ID, or None if not found."""
        ...

    async def get_account_by_email(self, email: str) -> Optional[Account]:
        """Get an account by email (normalized), or None if not found."""
        ...

    async def update_account(self, account_id: str, request: AccountUpdate) -> Account:
        """
        Apply a partial update, re-hashing the password only if it was set.

        Raises:
            AccountNotFoundError: If no account has this ID
        """
        ...

    async def save_account(self, account: Account) -> Account:
        """Write back a loaded account after in-place changes."""
        ...

    async def verify_password(self, account: Account, candidate: str) -> bool:
        """Check a plaintext candidate against the account's stored digest."""
        ...

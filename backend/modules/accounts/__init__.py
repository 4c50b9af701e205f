"""
Accounts module.

Owns the account record: its schema, email uniqueness, timestamps, password
hashing on write and password verification on read.

Public API:
- IAccountService: Interface for account operations
- get_account_service: Process-wide AccountService
- Account, AccountCreate, AccountUpdate, Address: Models
- Account exceptions: DuplicateEmailError, AccountNotFoundError, etc.
"""

from .interfaces import IAccountService, IAccountRepository, IPasswordHasher
from .models import Account, AccountCreate, AccountUpdate, Address
from .exceptions import (
    AccountError,
    AccountNotFoundError,
    DuplicateEmailError,
    PasswordHashingError,
    MalformedDigestError,
    PasswordTooLongError,
)
from .service import AccountService, get_account_service, reset_account_service

__all__ = [
    # Interfaces
    "IAccountService",
    "IAccountRepository",
    "IPasswordHasher",
    # Service
    "AccountService",
    "get_account_service",
    "reset_account_service",
    # Models
    "Account",
    "AccountCreate",
    "AccountUpdate",
    "Address",
    # Exceptions
    "AccountError",
    "AccountNotFoundError",
    "DuplicateEmailError",
    "PasswordHashingError",
    "MalformedDigestError",
    "PasswordTooLongError",
]

"""
Accounts module exceptions.

These exceptions are raised by the accounts module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import (
    AccountStoreError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class AccountError(AccountStoreError):
    """Base exception for account-related errors."""

    pass


class AccountNotFoundError(NotFoundError):
    """Raised when an account is not found."""

    def __init__(self, account_id: str):
        super().__init__(
            f"Account not found: {account_id}",
            code="ACCOUNT_NOT_FOUND",
            details={"account_id": account_id},
        )


class DuplicateEmailError(ConflictError):
    """Raised when the storage engine rejects a second account for an email."""

    def __init__(self, email: Optional[str] = None):
        message = "An account with this email already exists"
        if email:
            message = f"{message}: {email}"
        super().__init__(
            message,
            code="DUPLICATE_EMAIL",
            details={"email": email} if email else {},
        )


class PasswordHashingError(ExternalServiceError):
    """Raised when salt generation or hashing fails; the write is aborted."""

    def __init__(self, cause: BaseException):
        super().__init__(
            f"Password hashing failed: {cause}",
            service="bcrypt",
            code="PASSWORD_HASHING_FAILED",
            details={"cause": repr(cause)},
        )


class MalformedDigestError(AccountError):
    """Raised when a stored password is not a valid bcrypt digest."""

    def __init__(self, account_id: Optional[str] = None):
        super().__init__(
            "Stored password is not a valid digest",
            code="MALFORMED_DIGEST",
            details={"account_id": account_id} if account_id else {},
        )


class PasswordTooLongError(ValidationError):
    """Raised when a plaintext password exceeds bcrypt's input limit."""

    def __init__(self, max_bytes: int, actual_bytes: int):
        super().__init__(
            f"Password must be at most {max_bytes} bytes, got {actual_bytes}",
            code="PASSWORD_TOO_LONG",
            details={"max_bytes": max_bytes, "actual_bytes": actual_bytes},
        )

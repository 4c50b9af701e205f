"""
Accounts module data models.

These models define the account record as stored in the ``accounts`` table
and the request shapes used to create and update it. Normalization (email
trimming/lowercasing, name trimming, the roles default) lives here so that it
applies to every write path.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, StringConstraints, field_validator


DEFAULT_ROLES = ("user",)

# Fields written by callers; id and timestamps belong to the persistence layer.
WRITABLE_FIELDS = (
    "email",
    "password",
    "first_name",
    "last_name",
    "roles",
    "profile_picture",
    "address",
)

NormalizedEmail = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1)
]
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]


def default_roles() -> list[str]:
    return list(DEFAULT_ROLES)


def _roles_or_default(value: Any) -> Any:
    if value is None or (isinstance(value, (list, tuple)) and len(value) == 0):
        return default_roles()
    return value


class Address(BaseModel):
    """Postal address. Every part is optional and unvalidated."""

    street: Optional[str] = Field(None, description="Street and number")
    city: Optional[str] = Field(None, description="City")
    state: Optional[str] = Field(None, description="State or region")
    zip_code: Optional[str] = Field(None, description="Postal code")
    country: Optional[str] = Field(None, description="Country")


class Account(BaseModel):
    """
    A persisted user account.

    Instances are produced by the repository from stored rows. They can be
    mutated in place and handed back to ``AccountService.save_account``;
    assignments are validated, so normalization applies there too.

    The ``password`` field always holds the stored bcrypt digest of a loaded
    account. It is excluded from ``repr`` to keep digests out of logs.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., description="Account ID (UUID)")
    email: NormalizedEmail = Field(..., description="Login email, unique and lowercase")
    password: str = Field(..., repr=False, description="bcrypt digest")
    first_name: Optional[TrimmedStr] = Field(None, description="Given name")
    last_name: Optional[TrimmedStr] = Field(None, description="Family name")
    roles: list[str] = Field(default_factory=default_roles, description="Granted roles")
    profile_picture: Optional[str] = Field(None, description="Profile picture URL or path")
    address: Optional[Address] = Field(None, description="Postal address")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last write time")

    # Snapshot of the writable fields as last read from or written to storage.
    _persisted: dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("roles", mode="before")
    @classmethod
    def _apply_default_roles(cls, value: Any) -> Any:
        return _roles_or_default(value)

    def to_document(self) -> dict[str, Any]:
        """Return the writable fields as a storage document."""
        return self.model_dump(mode="json", include=set(WRITABLE_FIELDS))

    def mark_persisted(self) -> None:
        """Record the current field values as the last-persisted state."""
        self._persisted = self.to_document()

    def persisted_document(self) -> dict[str, Any]:
        """Return a copy of the last-persisted state of the writable fields."""
        return dict(self._persisted)


class AccountCreate(BaseModel):
    """Request to create a new account. ``password`` is the plaintext."""

    email: NormalizedEmail = Field(..., description="Login email")
    password: str = Field(..., min_length=1, repr=False, description="Plaintext password")
    first_name: Optional[TrimmedStr] = None
    last_name: Optional[TrimmedStr] = None
    roles: list[str] = Field(default_factory=default_roles)
    profile_picture: Optional[str] = None
    address: Optional[Address] = None

    @field_validator("roles", mode="before")
    @classmethod
    def _apply_default_roles(cls, value: Any) -> Any:
        return _roles_or_default(value)

    def to_document(self) -> dict[str, Any]:
        """Return the storage document for this request (plaintext password)."""
        return self.model_dump(mode="json", exclude_none=True)


class AccountUpdate(BaseModel):
    """
    Partial update of an account.

    Only fields that were explicitly set are written. Setting ``password``
    causes it to be re-hashed; setting ``roles`` to an empty list restores
    the default roles.
    """

    email: Optional[NormalizedEmail] = None
    password: Optional[str] = Field(None, min_length=1, repr=False)
    first_name: Optional[TrimmedStr] = None
    last_name: Optional[TrimmedStr] = None
    roles: Optional[list[str]] = None
    profile_picture: Optional[str] = None
    address: Optional[Address] = None

    @field_validator("email", "password")
    @classmethod
    def _reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("field cannot be cleared")
        return value

    @field_validator("roles", mode="before")
    @classmethod
    def _apply_default_roles(cls, value: Any) -> Any:
        return _roles_or_default(value)

    def to_changes(self) -> dict[str, Any]:
        """Return only the fields the caller set, as a storage document."""
        return self.model_dump(mode="json", exclude_unset=True)

"""
Shared infrastructure for the Account Store backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- repository: Base repository holding the Supabase client

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    AccountStoreError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "AccountStoreError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",
]

"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest

from modules.accounts.repository import reset_account_repository
from modules.accounts.service import reset_account_service
from shared.config import get_settings
from shared.database import reset_client_cache


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset process-wide singletons before and after each test."""
    reset_account_service()
    reset_account_repository()
    reset_client_cache()
    yield
    reset_account_service()
    reset_account_repository()
    reset_client_cache()
    get_settings.cache_clear()


@pytest.fixture
def test_email() -> str:
    """Provide a consistent test email."""
    return "u1@x.com"


@pytest.fixture
def test_password() -> str:
    """Provide a consistent test password."""
    return "secret1"

"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and the table a repository writes to.
"""

from typing import Any, Generic, Optional, TypeVar
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Query builder for the repository's table via self._table()
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class AccountRepository(BaseRepository[Account]):
            def get_by_id(self, account_id: str) -> Optional[Account]:
                result = self._table().select("*").eq("id", account_id).execute()
                row = self._first(result)
                return self._map_to_account(row) if row else None
    """

    table_name: str = ""

    def __init__(self, db: Client, table_name: Optional[str] = None) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
            table_name: Overrides the class-level table name.
        """
        self._db = db
        if table_name:
            self.table_name = table_name

    def _table(self):
        """Return a query builder for this repository's table."""
        return self._db.table(self.table_name)

    @staticmethod
    def _first(result: Any) -> Optional[dict[str, Any]]:
        """Return the first row of a query result, or None if it is empty."""
        if not result.data:
            return None
        return result.data[0]

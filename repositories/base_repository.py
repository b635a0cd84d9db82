"""
Base Repository
Generic repository pattern for database operations
"""

from abc import ABC
from typing import Any, Dict, List, Optional

import asyncpg

from utils.logger import LoggerMixin


class BaseRepository(LoggerMixin, ABC):
    """
    Base repository class for database operations.

    Subclasses provide table_name and primary_key. A repository built without
    a pool degrades to no-ops, so the bot runs without a database.
    """

    def __init__(
        self,
        pool: Optional[asyncpg.Pool],
        table_name: str,
        primary_key: str = "id"
    ):
        """
        Create a new repository instance.

        Args:
            pool: PostgreSQL connection pool, or None when no database is configured
            table_name: Database table name
            primary_key: Primary key column name
        """
        if self.__class__ == BaseRepository:
            raise TypeError("Cannot instantiate abstract BaseRepository directly")

        super().__init__(self.__class__.__name__)
        self.pool = pool
        self.table_name = table_name
        self.primary_key = primary_key

    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self.pool is not None

    async def query(
        self,
        sql: str,
        params: Optional[List[Any]] = None
    ) -> Optional[asyncpg.Record]:
        """
        Execute a raw query returning one row.

        Args:
            sql: SQL query string
            params: Query parameters

        Returns:
            First row, or None when there is none or no database
        """
        if not self.is_connected():
            self.logger.debug("Database not connected, query skipped")
            return None

        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchrow(sql, *(params or []))
        except Exception as e:
            self.logger.error(f"Query failed: {e}")
            raise

    async def find_by_id(self, id: Any) -> Optional[Dict[str, Any]]:
        """
        Find a single record by primary key.

        Args:
            id: Primary key value

        Returns:
            Record as dict or None
        """
        sql = f"""
            SELECT * FROM {self.table_name}
            WHERE {self.primary_key} = $1
        """
        row = await self.query(sql, [id])
        return dict(row) if row else None

    async def upsert(
        self,
        data: Dict[str, Any],
        conflict_columns: List[str]
    ) -> Optional[Dict[str, Any]]:
        """
        Upsert (insert or update) a record.

        Args:
            data: Record data (must include primary key)
            conflict_columns: Columns for conflict resolution

        Returns:
            Upserted record as dict or None
        """
        columns = list(data.keys())
        values = list(data.values())

        placeholders = ", ".join(f"${i + 1}" for i in range(len(values)))
        conflict_fields = ", ".join(conflict_columns)

        update_columns = [
            f"{column} = EXCLUDED.{column}"
            for column in columns
            if column not in conflict_columns
        ]

        if update_columns:
            update_clause = ", ".join(update_columns) + ", updated_at = CURRENT_TIMESTAMP"
        else:
            update_clause = "updated_at = CURRENT_TIMESTAMP"

        sql = f"""
            INSERT INTO {self.table_name} ({', '.join(columns)})
            VALUES ({placeholders})
            ON CONFLICT ({conflict_fields})
            DO UPDATE SET {update_clause}
            RETURNING *
        """

        row = await self.query(sql, values)
        return dict(row) if row else None

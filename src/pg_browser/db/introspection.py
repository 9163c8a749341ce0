"""PostgreSQL catalog browsing.

This module lists the base tables of a database and the columns of a
table using ``information_schema``.
"""

import time

import asyncpg
from asyncpg import Pool
from asyncpg.connection import Connection

from pg_browser.models.errors import DatabaseError
from pg_browser.models.schema import ColumnMeta, TableRef
from pg_browser.observability.metrics import metrics

SYSTEM_SCHEMAS = ("pg_catalog", "information_schema")

LIST_TABLES_QUERY = """
    SELECT
        table_schema,
        table_name
    FROM information_schema.tables
    WHERE table_type = 'BASE TABLE'
      AND table_schema <> ALL($1::text[])
    ORDER BY table_schema, table_name
"""

LIST_COLUMNS_QUERY = """
    SELECT column_name, data_type
    FROM information_schema.columns
    WHERE table_schema = $1 AND table_name = $2
    ORDER BY ordinal_position
"""


class SchemaIntrospector:
    """Catalog browser bound to one connection pool.

    Attributes:
        pool: Database connection pool.
    """

    def __init__(self, pool: Pool):
        """Initialize schema introspector.

        Args:
            pool: asyncpg connection pool.
        """
        self.pool = pool

    async def list_tables(self) -> list[TableRef]:
        """List base tables outside the system schemas.

        Views are excluded. The connection is returned to the pool whether
        or not the query succeeds.

        Returns:
            list[TableRef]: Tables ordered by schema, then table name.

        Raises:
            DatabaseError: If the catalog query fails.

        Example:
            >>> introspector = SchemaIntrospector(pool)
            >>> tables = await introspector.list_tables()
            >>> print([t.full_name for t in tables])
        """
        started = time.perf_counter()
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(LIST_TABLES_QUERY, list(SYSTEM_SCHEMAS))
        except asyncpg.PostgresError as e:
            raise DatabaseError(
                message=str(e),
                details={"error_code": getattr(e, "sqlstate", None)},
            ) from e
        except Exception as e:
            raise DatabaseError(
                message=str(e) or type(e).__name__,
                details={"error_type": type(e).__name__},
            ) from e
        finally:
            metrics.observe_db_query_duration("list_tables", time.perf_counter() - started)

        return [
            TableRef(table_schema=row["table_schema"], table_name=row["table_name"])
            for row in rows
        ]

    async def list_columns(
        self, conn: Connection, schema_name: str, table_name: str
    ) -> list[ColumnMeta]:
        """Get column names and declared types for a table.

        Runs on a connection the caller already holds.

        Args:
            conn: Database connection.
            schema_name: Schema name.
            table_name: Name of the table.

        Returns:
            list[ColumnMeta]: Columns in declaration order. Empty if the
            table does not exist.
        """
        rows = await conn.fetch(LIST_COLUMNS_QUERY, schema_name, table_name)
        return [
            ColumnMeta(column_name=row["column_name"], data_type=row["data_type"])
            for row in rows
        ]

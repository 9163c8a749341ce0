"""Paginated table reads.

This module reads one page of rows from a table together with its column
metadata and exact row count, all on a single pooled connection.
"""

import datetime
import decimal
import math
import time
import uuid
from typing import Any

import asyncpg
from asyncpg import Pool

from pg_browser.db.introspection import SchemaIntrospector
from pg_browser.models.errors import DatabaseError
from pg_browser.models.schema import TablePage
from pg_browser.observability.metrics import metrics

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0


def quote_ident(name: str) -> str:
    """Quote an SQL identifier.

    Embedded double quotes are doubled, so the result always names exactly
    one identifier no matter what ``name`` contains.

    Example:
        >>> quote_ident('weird"name')
        '"weird""name"'
    """
    return '"' + name.replace('"', '""') + '"'


def qualified_name(schema_name: str, table_name: str) -> str:
    """Build a quoted ``schema.table`` reference."""
    return f"{quote_ident(schema_name)}.{quote_ident(table_name)}"


def serialize_value(value: Any) -> Any:
    """Recursively convert a PostgreSQL value to a JSON-compatible one.

    - datetime types: ISO format strings
    - timedelta: string
    - decimal.Decimal: exact string, as ``numeric`` values can exceed float precision
    - NaN and infinite floats: None
    - uuid.UUID: string
    - bytes: hexadecimal string
    - asyncpg.Range: dict of bounds and flags
    - asyncpg.BitString: string of 0s and 1s
    - records, lists, tuples and dicts: serialized element-wise
    - anything else unrecognised: ``str(value)``
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value

    if isinstance(value, float):
        return value if math.isfinite(value) else None

    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()

    if isinstance(value, datetime.timedelta):
        return str(value)

    if isinstance(value, decimal.Decimal):
        return str(value)

    if isinstance(value, uuid.UUID):
        return str(value)

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()

    if isinstance(value, asyncpg.Range):
        return {
            "lower": serialize_value(value.lower),
            "upper": serialize_value(value.upper),
            "lower_inc": value.lower_inc,
            "upper_inc": value.upper_inc,
            "isempty": value.isempty,
        }

    if isinstance(value, asyncpg.BitString):
        return value.as_string()

    # Composite types come back as nested records
    if isinstance(value, asyncpg.Record):
        return {k: serialize_value(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]

    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}

    return str(value)


def serialize_rows(records: list[Any]) -> list[dict[str, Any]]:
    """Convert asyncpg records into JSON-compatible row dictionaries."""
    return [
        {key: serialize_value(value) for key, value in dict(record).items()}
        for record in records
    ]


class TableDataReader:
    """Reads pages of table data from one connection pool.

    Example:
        >>> reader = TableDataReader(pool)
        >>> page = await reader.read_page("public", "widgets", limit=2, offset=1)
        >>> print(page.total, len(page.rows))
    """

    def __init__(self, pool: Pool) -> None:
        """Initialize table reader.

        Args:
            pool: asyncpg connection pool for database connections.
        """
        self.pool = pool
        self.introspector = SchemaIntrospector(pool)

    async def read_page(
        self,
        schema_name: str,
        table_name: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> TablePage:
        """Read column metadata, one page of rows and the exact row count.

        This method:
        1. Acquires a connection from the pool
        2. Fetches column names and declared types in declaration order
        3. Fetches ``limit`` rows starting at ``offset``
        4. Counts every row of the table with ``COUNT(*)``
        5. Releases the connection, on success and on failure

        ``limit`` and ``offset`` are bound parameters and are not validated
        here; the database decides what to do with out-of-range values. The
        count is exact, which costs a full scan on large tables.

        Args:
            schema_name: Schema containing the table.
            table_name: Table to read.
            limit: Maximum number of rows to return.
            offset: Number of rows to skip.

        Returns:
            TablePage: Columns, rows and total row count.

        Raises:
            DatabaseError: If any of the three queries fails, including when
                the table does not exist.
        """
        relation = qualified_name(schema_name, table_name)
        started = time.perf_counter()

        try:
            async with self.pool.acquire() as conn:
                columns = await self.introspector.list_columns(conn, schema_name, table_name)
                records = await conn.fetch(
                    f"SELECT * FROM {relation} LIMIT $1 OFFSET $2", limit, offset
                )
                total = await conn.fetchval(f"SELECT COUNT(*) FROM {relation}")
            rows = serialize_rows(records)
        except asyncpg.PostgresError as e:
            raise DatabaseError(
                message=str(e),
                details={
                    "error_code": getattr(e, "sqlstate", None),
                    "relation": f"{schema_name}.{table_name}",
                },
            ) from e
        except Exception as e:
            # Catch-all for unexpected errors
            raise DatabaseError(
                message=str(e) or type(e).__name__,
                details={
                    "error_type": type(e).__name__,
                    "relation": f"{schema_name}.{table_name}",
                },
            ) from e
        finally:
            metrics.observe_db_query_duration("read_page", time.perf_counter() - started)

        return TablePage(columns=columns, rows=rows, total=int(total))

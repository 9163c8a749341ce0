"""Data models module."""

from pg_browser.models.connection import (
    ConnectionEntry,
    ConnectionFieldsParams,
    ConnectionParams,
    ConnectionRequest,
    ConnectionStringParams,
    parse_connection_request,
)
from pg_browser.models.errors import (
    ConnectionNotFoundError,
    DatabaseConnectionError,
    DatabaseError,
    ErrorCode,
    PgBrowserError,
    ValidationError,
)
from pg_browser.models.schema import ColumnMeta, TablePage, TableRef

__all__ = [
    # Connection models
    "ConnectionRequest",
    "ConnectionStringParams",
    "ConnectionFieldsParams",
    "ConnectionParams",
    "ConnectionEntry",
    "parse_connection_request",
    # Schema models
    "TableRef",
    "ColumnMeta",
    "TablePage",
    # Error models
    "ErrorCode",
    "PgBrowserError",
    "ValidationError",
    "ConnectionNotFoundError",
    "DatabaseConnectionError",
    "DatabaseError",
]

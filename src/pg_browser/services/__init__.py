"""Service layer for the PostgreSQL browser service."""

from pg_browser.services.table_reader import TableDataReader, quote_ident

__all__ = [
    "TableDataReader",
    "quote_ident",
]

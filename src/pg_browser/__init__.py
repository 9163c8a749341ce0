"""PostgreSQL Browser - connect, browse tables and page through rows.

A small HTTP service that opens pooled connections to PostgreSQL databases
on behalf of clients, lists their tables and serves table contents page by
page.
"""

__version__ = "0.1.0"

from pg_browser.config.settings import Settings, get_settings
from pg_browser.models.errors import (
    ConnectionNotFoundError,
    DatabaseConnectionError,
    DatabaseError,
    ErrorCode,
    PgBrowserError,
    ValidationError,
)

__all__ = [
    "__version__",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "PgBrowserError",
    "ValidationError",
    "ConnectionNotFoundError",
    "DatabaseConnectionError",
    "DatabaseError",
    "ErrorCode",
]

"""Database connection and introspection utilities.

This package provides connection pool creation, the registry of live
connections and catalog browsing for PostgreSQL.
"""

from pg_browser.db.introspection import SchemaIntrospector
from pg_browser.db.pool import close_pool, create_pool
from pg_browser.db.registry import ConnectionRegistry, generate_connection_id

__all__ = [
    "SchemaIntrospector",
    "ConnectionRegistry",
    "generate_connection_id",
    "create_pool",
    "close_pool",
]

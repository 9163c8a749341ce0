"""Registry of live database connections keyed by opaque identifiers."""

import asyncio
import logging
import uuid
from collections.abc import Callable
from typing import Any

from asyncpg import Pool

from pg_browser.config.settings import PoolConfig
from pg_browser.db.pool import close_pool, create_pool
from pg_browser.models.connection import (
    ConnectionEntry,
    ConnectionFieldsParams,
    ConnectionStringParams,
)
from pg_browser.models.errors import ConnectionNotFoundError, DatabaseConnectionError
from pg_browser.observability.metrics import metrics

logger = logging.getLogger(__name__)


def generate_connection_id() -> str:
    """Generate a fresh opaque connection identifier."""
    return uuid.uuid4().hex


class ConnectionRegistry:
    """Owns every live connection pool handed out to clients.

    Any caller holding an identifier can query or close its connection;
    there is no ownership beyond possession of the identifier. Mutations
    are serialized through an asyncio lock so a concurrent ``close`` and
    ``get`` on the same identifier observe either the whole entry or none.
    Queries already running on a checked-out connection are not affected
    by registry bookkeeping.
    """

    def __init__(
        self,
        pool_config: PoolConfig | None = None,
        id_factory: Callable[[], str] = generate_connection_id,
    ) -> None:
        """Initialize an empty registry.

        Args:
            pool_config: Settings used for pools created through ``connect``.
            id_factory: Identifier generator. Must produce unique strings.
        """
        self.pool_config = pool_config or PoolConfig()
        self._id_factory = id_factory
        self._entries: dict[str, ConnectionEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._entries

    def connection_ids(self) -> list[str]:
        """List identifiers of all live connections."""
        return list(self._entries)

    async def register(
        self,
        pool: Pool | Any,
        config: ConnectionStringParams | ConnectionFieldsParams,
    ) -> str:
        """Store a verified pool under a fresh identifier.

        Identical parameters registered twice yield two distinct entries.

        Args:
            pool: A pool that already passed verification.
            config: The parameters the pool was created from, kept verbatim.

        Returns:
            str: The new connection identifier.
        """
        entry = await self._store(pool, config)
        return entry.connection_id

    async def _store(
        self,
        pool: Pool | Any,
        config: ConnectionStringParams | ConnectionFieldsParams,
    ) -> ConnectionEntry:
        async with self._lock:
            connection_id = self._id_factory()
            while connection_id in self._entries:
                connection_id = self._id_factory()

            entry = ConnectionEntry(connection_id=connection_id, pool=pool, config=config)
            self._entries[connection_id] = entry
            metrics.set_connections_active(len(self._entries))

        logger.info(
            "Connection registered",
            extra={"connection_id": connection_id, "target": config.safe_dsn},
        )
        return entry

    def get(self, connection_id: str) -> ConnectionEntry:
        """Look up a live entry.

        Raises:
            ConnectionNotFoundError: If the identifier was never issued or
                its connection has been closed.
        """
        entry = self._entries.get(connection_id)
        if entry is None:
            raise ConnectionNotFoundError(connection_id)
        return entry

    async def connect(
        self, params: ConnectionStringParams | ConnectionFieldsParams
    ) -> ConnectionEntry:
        """Create, verify and register a pool in one step.

        Nothing is registered when pool creation or verification fails.

        Raises:
            DatabaseConnectionError: If the database cannot be reached.
        """
        try:
            pool = await create_pool(params, self.pool_config)
        except DatabaseConnectionError:
            metrics.increment_connect_attempt(status="error")
            raise

        metrics.increment_connect_attempt(status="success")
        return await self._store(pool, params)

    async def close(self, connection_id: str) -> None:
        """Remove an entry and shut its pool down.

        The entry is removed before the pool is closed, so it is unusable
        from then on even if the shutdown fails.

        Raises:
            ConnectionNotFoundError: If the identifier is unknown.
            DatabaseError: If the pool fails to shut down.
        """
        async with self._lock:
            entry = self._entries.pop(connection_id, None)
            metrics.set_connections_active(len(self._entries))

        if entry is None:
            raise ConnectionNotFoundError(connection_id)

        logger.info("Closing connection", extra={"connection_id": connection_id})
        await close_pool(entry.pool, timeout=self.pool_config.close_timeout)

    async def close_all(self) -> None:
        """Close every live connection. Used at application shutdown."""
        async with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
            metrics.set_connections_active(0)

        for entry in entries:
            try:
                await close_pool(entry.pool, timeout=self.pool_config.close_timeout)
            except Exception as e:
                # Log error but continue closing other pools
                logger.error(f"Error closing connection '{entry.connection_id}': {e!s}")

        if entries:
            logger.info(f"Closed {len(entries)} connection(s)")

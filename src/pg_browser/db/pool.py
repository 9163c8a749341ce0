"""Database connection pool management.

This module creates asyncpg connection pools from client-supplied connection
parameters and shuts them down again. Every pool is verified with a real
checkout before it is handed out, so bad credentials or unreachable hosts
fail at connect time rather than on the first query.
"""

import asyncio
import logging
import ssl

import asyncpg
from asyncpg import Pool

from pg_browser.config.settings import PoolConfig
from pg_browser.models.connection import ConnectionFieldsParams, ConnectionStringParams
from pg_browser.models.errors import DatabaseConnectionError, DatabaseError

logger = logging.getLogger(__name__)


def build_ssl_option(ssl_mode: str) -> ssl.SSLContext | str | bool:
    """Translate the configured TLS posture into asyncpg's ``ssl`` argument.

    Certificates are never verified, so self-signed certificates used by
    hosted providers are accepted.

    Args:
        ssl_mode: One of ``require``, ``prefer`` or ``disable``.

    Returns:
        An SSL context for ``require``, asyncpg's ``"prefer"`` mode, or False.
    """
    if ssl_mode == "disable":
        return False
    if ssl_mode == "prefer":
        return "prefer"

    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _driver_message(exc: BaseException) -> str:
    # TimeoutError and some OSErrors stringify to an empty message
    return str(exc) or type(exc).__name__


async def create_pool(
    params: ConnectionStringParams | ConnectionFieldsParams,
    config: PoolConfig | None = None,
) -> Pool:
    """Create and verify a connection pool for one database target.

    Args:
        params: Either a connection string or discrete connection fields.
        config: Pool sizing, timeouts and TLS posture. Defaults apply if None.

    Returns:
        Pool: An asyncpg connection pool that has completed one
        checkout-and-release round trip.

    Raises:
        DatabaseConnectionError: If the pool cannot be created or the
            verification checkout fails. Carries the driver's message.

    Example:
        >>> params = ConnectionFieldsParams(host="localhost", database="mydb", user="me")
        >>> pool = await create_pool(params)
        >>> async with pool.acquire() as conn:
        ...     result = await conn.fetch("SELECT 1")
    """
    config = config or PoolConfig()

    pool_kwargs = {
        "min_size": config.min_size,
        "max_size": config.max_size,
        "max_inactive_connection_lifetime": config.idle_timeout,
        "timeout": config.connect_timeout,
        "ssl": build_ssl_option(config.ssl_mode),
    }

    if isinstance(params, ConnectionStringParams):
        connect_kwargs = {"dsn": params.connection_string.get_secret_value()}
    else:
        connect_kwargs = {
            "host": params.host,
            "port": params.port,
            "database": params.database,
            "user": params.user,
            "password": params.password.get_secret_value() if params.password else None,
        }

    logger.info(f"Creating connection pool for {params.safe_dsn}")

    pool: Pool | None = None
    try:
        pool = await asyncpg.create_pool(**connect_kwargs, **pool_kwargs)
        if pool is None:
            raise RuntimeError(f"Failed to create connection pool for {params.safe_dsn}")

        # Verification round trip: check out one connection and return it
        async with pool.acquire(timeout=config.connect_timeout):
            pass
    except Exception as e:
        logger.warning(f"Connection to {params.safe_dsn} failed: {_driver_message(e)}")
        if pool is not None:
            pool.terminate()
        raise DatabaseConnectionError(
            message=_driver_message(e),
            details={"error_type": type(e).__name__},
        ) from e

    return pool


async def close_pool(pool: Pool, timeout: float = 10.0) -> None:
    """Close a connection pool gracefully.

    Waits for checked-out connections to be released. If graceful shutdown
    takes too long, the pool is terminated.

    Args:
        pool: The pool to close.
        timeout: Maximum time in seconds to wait for graceful shutdown
            before forcing termination.

    Raises:
        DatabaseError: If closing fails for a reason other than the timeout.
            The pool is terminated before the error is raised.
    """
    try:
        await asyncio.wait_for(pool.close(), timeout=timeout)
    except TimeoutError:
        logger.warning("Graceful pool close timed out, forcing termination")
        pool.terminate()
    except Exception as e:
        logger.error(f"Error closing pool: {e!s}")
        pool.terminate()
        raise DatabaseError(
            message=_driver_message(e),
            details={"error_type": type(e).__name__},
        ) from e

"""Unit tests for pool creation and shutdown."""

import asyncio
import ssl
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest
from pydantic import SecretStr

from pg_browser.config.settings import PoolConfig
from pg_browser.db.pool import build_ssl_option, close_pool, create_pool
from pg_browser.models.connection import ConnectionFieldsParams, ConnectionStringParams
from pg_browser.models.errors import DatabaseConnectionError, DatabaseError


@pytest.fixture
def fields_params() -> ConnectionFieldsParams:
    """Discrete connection parameters."""
    return ConnectionFieldsParams(
        host="db.example.com",
        port=5432,
        database="app",
        user="bob",
        password=SecretStr("hunter2"),
    )


class TestBuildSslOption:
    """Tests for TLS posture translation."""

    def test_require_returns_unverified_context(self) -> None:
        """Test that require accepts self-signed certificates."""
        option = build_ssl_option("require")
        assert isinstance(option, ssl.SSLContext)
        assert option.check_hostname is False
        assert option.verify_mode == ssl.CERT_NONE

    def test_prefer(self) -> None:
        assert build_ssl_option("prefer") == "prefer"

    def test_disable(self) -> None:
        assert build_ssl_option("disable") is False


class TestCreatePool:
    """Tests for create_pool."""

    @pytest.mark.asyncio
    async def test_fields_variant(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_pool: MagicMock,
        fields_params: ConnectionFieldsParams,
    ) -> None:
        """Test pool creation from discrete fields with fixed pool settings."""
        mock_create_pool = AsyncMock(return_value=mock_pool)
        monkeypatch.setattr(asyncpg, "create_pool", mock_create_pool)

        pool = await create_pool(fields_params)

        assert pool is mock_pool
        kwargs = mock_create_pool.call_args.kwargs
        assert kwargs["host"] == "db.example.com"
        assert kwargs["port"] == 5432
        assert kwargs["database"] == "app"
        assert kwargs["user"] == "bob"
        assert kwargs["password"] == "hunter2"
        assert kwargs["max_size"] == 20
        assert kwargs["max_inactive_connection_lifetime"] == 30.0
        assert kwargs["timeout"] == 10.0
        assert isinstance(kwargs["ssl"], ssl.SSLContext)
        assert "dsn" not in kwargs

    @pytest.mark.asyncio
    async def test_connection_string_variant(
        self, monkeypatch: pytest.MonkeyPatch, mock_pool: MagicMock
    ) -> None:
        """Test pool creation from a connection string."""
        mock_create_pool = AsyncMock(return_value=mock_pool)
        monkeypatch.setattr(asyncpg, "create_pool", mock_create_pool)
        params = ConnectionStringParams(
            connection_string=SecretStr("postgresql://bob:hunter2@db/app")
        )

        await create_pool(params, PoolConfig(ssl_mode="disable"))

        kwargs = mock_create_pool.call_args.kwargs
        assert kwargs["dsn"] == "postgresql://bob:hunter2@db/app"
        assert kwargs["ssl"] is False
        assert "host" not in kwargs

    @pytest.mark.asyncio
    async def test_verification_round_trip(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_pool: MagicMock,
        fields_params: ConnectionFieldsParams,
    ) -> None:
        """Test that one connection is checked out and released before returning."""
        monkeypatch.setattr(asyncpg, "create_pool", AsyncMock(return_value=mock_pool))

        await create_pool(fields_params)

        mock_pool.acquire.assert_called_once_with(timeout=10.0)
        mock_pool.acquire.return_value.__aenter__.assert_awaited_once()
        mock_pool.acquire.return_value.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_failure_raises_connection_error(
        self, monkeypatch: pytest.MonkeyPatch, fields_params: ConnectionFieldsParams
    ) -> None:
        """Test that a driver failure surfaces with its message."""
        monkeypatch.setattr(
            asyncpg,
            "create_pool",
            AsyncMock(
                side_effect=asyncpg.PostgresError(
                    'password authentication failed for user "bob"'
                )
            ),
        )

        with pytest.raises(DatabaseConnectionError) as exc_info:
            await create_pool(fields_params)

        assert "password authentication failed" in exc_info.value.message
        assert exc_info.value.http_status == 400

    @pytest.mark.asyncio
    async def test_verification_failure_terminates_pool(
        self,
        monkeypatch: pytest.MonkeyPatch,
        mock_pool: MagicMock,
        fields_params: ConnectionFieldsParams,
    ) -> None:
        """Test that a failed checkout tears the half-built pool down."""
        mock_pool.acquire.return_value.__aenter__ = AsyncMock(
            side_effect=OSError("Connection refused")
        )
        monkeypatch.setattr(asyncpg, "create_pool", AsyncMock(return_value=mock_pool))

        with pytest.raises(DatabaseConnectionError, match="Connection refused"):
            await create_pool(fields_params)

        mock_pool.terminate.assert_called_once()

    @pytest.mark.asyncio
    async def test_timeout_has_readable_message(
        self, monkeypatch: pytest.MonkeyPatch, fields_params: ConnectionFieldsParams
    ) -> None:
        """Test that an empty timeout message is replaced by the error type."""
        monkeypatch.setattr(asyncpg, "create_pool", AsyncMock(side_effect=TimeoutError()))

        with pytest.raises(DatabaseConnectionError) as exc_info:
            await create_pool(fields_params)

        assert exc_info.value.message == "TimeoutError"


class TestClosePool:
    """Tests for close_pool."""

    @pytest.mark.asyncio
    async def test_graceful_close(self, mock_pool: MagicMock) -> None:
        """Test graceful close does not terminate."""
        await close_pool(mock_pool)
        mock_pool.close.assert_awaited_once()
        mock_pool.terminate.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_timeout_terminates(self, mock_pool: MagicMock) -> None:
        """Test that a hanging close is forced."""

        async def slow_close() -> None:
            await asyncio.sleep(10)

        mock_pool.close = slow_close

        await close_pool(mock_pool, timeout=0.05)

        mock_pool.terminate.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_error_raises_database_error(self, mock_pool: MagicMock) -> None:
        """Test that close failures surface after terminating the pool."""
        mock_pool.close = AsyncMock(side_effect=RuntimeError("connection lost"))

        with pytest.raises(DatabaseError, match="connection lost"):
            await close_pool(mock_pool)

        mock_pool.terminate.assert_called_once()

"""Unit tests for ConnectionRegistry."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from pg_browser.config.settings import PoolConfig
from pg_browser.db.registry import ConnectionRegistry, generate_connection_id
from pg_browser.models.connection import ConnectionFieldsParams, ConnectionStringParams
from pg_browser.models.errors import (
    ConnectionNotFoundError,
    DatabaseConnectionError,
    DatabaseError,
)


def make_pool() -> MagicMock:
    """Create a mock pool with async close."""
    pool = MagicMock()
    pool.close = AsyncMock()
    pool.terminate = MagicMock()
    return pool


class TestConnectionRegistry:
    """Test ConnectionRegistry functionality."""

    @pytest.fixture
    def config(self) -> ConnectionFieldsParams:
        """Create connection parameters."""
        return ConnectionFieldsParams(host="localhost", database="test_db", user="u")

    @pytest.fixture
    def registry(self) -> ConnectionRegistry:
        """Create an empty registry."""
        return ConnectionRegistry(PoolConfig(close_timeout=0.5))

    def test_generate_connection_id_unique(self) -> None:
        """Test that generated identifiers do not repeat."""
        ids = {generate_connection_id() for _ in range(1000)}
        assert len(ids) == 1000

    @pytest.mark.asyncio
    async def test_register_and_get(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test registering a pool and looking it up."""
        pool = make_pool()
        connection_id = await registry.register(pool, config)

        entry = registry.get(connection_id)
        assert entry.pool is pool
        assert entry.config == config
        assert entry.connection_id == connection_id
        assert connection_id in registry
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_identical_params_get_distinct_ids(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test that registration never deduplicates."""
        first = await registry.register(make_pool(), config)
        second = await registry.register(make_pool(), config)

        assert first != second
        assert len(registry) == 2
        assert sorted(registry.connection_ids()) == sorted([first, second])

    @pytest.mark.asyncio
    async def test_concurrent_registrations_are_unique(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test uniqueness under concurrent registration."""
        ids = await asyncio.gather(*(registry.register(make_pool(), config) for _ in range(50)))
        assert len(set(ids)) == 50
        assert len(registry) == 50

    @pytest.mark.asyncio
    async def test_colliding_id_is_regenerated(self, config: ConnectionFieldsParams) -> None:
        """Test that a live identifier is never handed out twice."""
        generated = iter(["same", "same", "other"])
        registry = ConnectionRegistry(id_factory=lambda: next(generated))

        first = await registry.register(make_pool(), config)
        second = await registry.register(make_pool(), config)

        assert first == "same"
        assert second == "other"

    def test_get_unknown_id(self, registry: ConnectionRegistry) -> None:
        """Test that never-issued identifiers yield NotFound."""
        with pytest.raises(ConnectionNotFoundError) as exc_info:
            registry.get("does-not-exist")
        assert exc_info.value.connection_id == "does-not-exist"

    @pytest.mark.asyncio
    async def test_close_removes_entry_and_closes_pool(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test that close shuts the pool down and invalidates the id."""
        pool = make_pool()
        connection_id = await registry.register(pool, config)

        await registry.close(connection_id)

        pool.close.assert_awaited_once()
        assert connection_id not in registry
        with pytest.raises(ConnectionNotFoundError):
            registry.get(connection_id)

    @pytest.mark.asyncio
    async def test_close_unknown_id(self, registry: ConnectionRegistry) -> None:
        """Test closing an unknown identifier."""
        with pytest.raises(ConnectionNotFoundError):
            await registry.close("does-not-exist")

    @pytest.mark.asyncio
    async def test_close_twice(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test that a second close reports NotFound."""
        connection_id = await registry.register(make_pool(), config)
        await registry.close(connection_id)

        with pytest.raises(ConnectionNotFoundError):
            await registry.close(connection_id)

    @pytest.mark.asyncio
    async def test_close_failure_still_removes_entry(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test that a failed shutdown leaves no stale entry behind."""
        pool = make_pool()
        pool.close = AsyncMock(side_effect=RuntimeError("server closed the connection"))
        connection_id = await registry.register(pool, config)

        with pytest.raises(DatabaseError, match="server closed the connection"):
            await registry.close(connection_id)

        assert connection_id not in registry
        pool.terminate.assert_called_once()

    @pytest.mark.asyncio
    async def test_concurrent_close_only_one_succeeds(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test racing closes on the same identifier."""
        pool = make_pool()
        connection_id = await registry.register(pool, config)

        results = await asyncio.gather(
            registry.close(connection_id),
            registry.close(connection_id),
            return_exceptions=True,
        )

        assert sum(1 for r in results if r is None) == 1
        assert sum(1 for r in results if isinstance(r, ConnectionNotFoundError)) == 1
        pool.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_registers_verified_pool(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test connect creates a pool with the registry's settings and registers it."""
        pool = make_pool()
        with pytest.MonkeyPatch.context() as m:
            mock_create_pool = AsyncMock(return_value=pool)
            m.setattr("pg_browser.db.registry.create_pool", mock_create_pool)

            entry = await registry.connect(config)

            mock_create_pool.assert_called_once_with(config, registry.pool_config)

        assert entry.pool is pool
        assert registry.get(entry.connection_id) is entry

    @pytest.mark.asyncio
    async def test_connect_failure_registers_nothing(self, registry: ConnectionRegistry) -> None:
        """Test that a failed connect leaves the registry untouched."""
        params = ConnectionStringParams(connection_string=SecretStr("postgresql://bad@nowhere/db"))
        with pytest.MonkeyPatch.context() as m:
            m.setattr(
                "pg_browser.db.registry.create_pool",
                AsyncMock(side_effect=DatabaseConnectionError("could not connect")),
            )

            with pytest.raises(DatabaseConnectionError):
                await registry.connect(params)

        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_close_all(
        self, registry: ConnectionRegistry, config: ConnectionFieldsParams
    ) -> None:
        """Test closing every pool, continuing past failures."""
        good = make_pool()
        bad = make_pool()
        bad.close = AsyncMock(side_effect=RuntimeError("boom"))
        await registry.register(good, config)
        await registry.register(bad, config)

        await registry.close_all()

        assert len(registry) == 0
        good.close.assert_awaited_once()
        bad.terminate.assert_called_once()

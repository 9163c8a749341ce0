"""Pytest configuration and shared fixtures.

This module provides shared fixtures and configuration for all tests.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from pg_browser.config.settings import reset_settings


@pytest.fixture(autouse=True)
def reset_config() -> None:
    """Reset global settings before each test."""
    reset_settings()


@pytest.fixture(autouse=True)
def disable_metrics_for_tests():
    """Disable metrics for tests to avoid port conflicts."""
    os.environ["OBSERVABILITY_METRICS_ENABLED"] = "false"
    yield
    # Clean up
    if "OBSERVABILITY_METRICS_ENABLED" in os.environ:
        del os.environ["OBSERVABILITY_METRICS_ENABLED"]


@pytest.fixture
def mock_connection() -> MagicMock:
    """Create a mock asyncpg connection."""
    conn = MagicMock()
    conn.execute = AsyncMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchval = AsyncMock(return_value=0)
    return conn


@pytest.fixture
def mock_pool(mock_connection: MagicMock) -> MagicMock:
    """Create a mock asyncpg connection pool."""
    pool = MagicMock()

    # Setup acquire context manager
    acquire_mock = MagicMock()
    acquire_mock.__aenter__ = AsyncMock(return_value=mock_connection)
    acquire_mock.__aexit__ = AsyncMock(return_value=None)
    pool.acquire = MagicMock(return_value=acquire_mock)

    pool.close = AsyncMock()
    pool.terminate = MagicMock()

    return pool

"""Configuration management module."""

from pg_browser.config.settings import (
    ObservabilityConfig,
    PoolConfig,
    SecurityConfig,
    ServerConfig,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "ObservabilityConfig",
    "PoolConfig",
    "SecurityConfig",
    "ServerConfig",
    "Settings",
    "get_settings",
    "reset_settings",
]

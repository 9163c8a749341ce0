"""FastAPI dependencies resolving per-application state."""

from fastapi import Request

from pg_browser.config.settings import Settings
from pg_browser.db.registry import ConnectionRegistry


def get_registry(request: Request) -> ConnectionRegistry:
    """Return the connection registry owned by the running application."""
    return request.app.state.registry


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings

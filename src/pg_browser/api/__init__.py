"""HTTP API for the PostgreSQL browser service."""

from pg_browser.api.app import create_app, lifespan
from pg_browser.api.routes import router

__all__ = ["create_app", "lifespan", "router"]

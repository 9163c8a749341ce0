"""Main entry point for the PostgreSQL browser service.

This module provides the CLI entry point that serves the HTTP API with
uvicorn.
"""

import uvicorn

from pg_browser.api.app import create_app
from pg_browser.config.settings import get_settings
from pg_browser.observability.logging import configure_logging


def main() -> None:
    """Start the HTTP server.

    Configuration is read from the environment (and ``.env``):

    - ``PORT`` (or ``SERVER_PORT``): listening port, default 5000
    - ``SERVER_HOST``: bind address, default 0.0.0.0
    - ``POOL_*``, ``SECURITY_*``, ``OBSERVABILITY_*``: see ``pg_browser.config``

    Example:
        >>> python -m pg_browser

        >>> PORT=8080 OBSERVABILITY_LOG_FORMAT=json python -m pg_browser
    """
    settings = get_settings()
    configure_logging(
        level=settings.observability.log_level,
        log_format=settings.observability.log_format,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()

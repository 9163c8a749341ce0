"""JSON response shaping for API failures."""

from typing import Any

from fastapi.responses import JSONResponse

from pg_browser.config.settings import SecurityConfig
from pg_browser.models.errors import ConnectionNotFoundError, PgBrowserError

NOT_FOUND_MESSAGE = "Connection not found"


def error_body(message: str, error: str | None, security: SecurityConfig) -> dict[str, Any]:
    """Build the ``{success: false, ...}`` body.

    The underlying error text is only included when the security policy
    allows exposing it.
    """
    body: dict[str, Any] = {"success": False, "message": message}
    if error is not None and security.expose_error_details:
        body["error"] = error
    return body


def error_response(
    exc: PgBrowserError,
    message: str,
    security: SecurityConfig,
    status_code: int | None = None,
) -> JSONResponse:
    """Convert a service error into the response for one operation.

    Unknown connections always produce a 404 with a fixed message and no
    cause detail, whatever operation was attempted.

    Args:
        exc: The error raised by the registry, browser or reader.
        message: Fixed, operation-specific message (e.g. "Failed to retrieve tables").
        security: Error exposure policy.
        status_code: Overrides the status the error class maps to.
    """
    if isinstance(exc, ConnectionNotFoundError):
        return JSONResponse(
            status_code=exc.http_status,
            content=error_body(NOT_FOUND_MESSAGE, None, security),
        )

    return JSONResponse(
        status_code=status_code or exc.http_status,
        content=error_body(message, exc.message, security),
    )

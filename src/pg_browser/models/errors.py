"""Custom exceptions and error codes for the PostgreSQL browser service.

This module defines a hierarchy of exceptions for the failure classes the
service distinguishes, and error codes for structured error reporting.
"""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the application."""

    # Client errors (4xx)
    INVALID_REQUEST = "invalid_request"
    CONNECTION_NOT_FOUND = "connection_not_found"
    DATABASE_CONNECTION_ERROR = "database_connection_error"

    # Server errors (5xx)
    INTERNAL_ERROR = "internal_error"
    DATABASE_ERROR = "database_error"


class PgBrowserError(Exception):
    """Base exception for all service errors.

    Every subclass carries the HTTP status it maps to at the API boundary.
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize base error.

        Args:
            message: Human-readable error message.
            code: Error code identifier.
            details: Optional additional context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code}, message={self.message!r})"


class ValidationError(PgBrowserError):
    """Exception raised when a request cannot be turned into valid parameters."""

    http_status = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCode.INVALID_REQUEST, details=details)


class ConnectionNotFoundError(PgBrowserError):
    """Exception raised when an identifier is absent from the registry.

    Raised both for identifiers that were never issued and for identifiers
    whose connection has already been closed.
    """

    http_status = 404

    def __init__(self, connection_id: str) -> None:
        """Initialize not-found error.

        Args:
            connection_id: The identifier that could not be resolved.
        """
        super().__init__(
            message=f"Connection '{connection_id}' not found",
            code=ErrorCode.CONNECTION_NOT_FOUND,
            details={"connection_id": connection_id},
        )
        self.connection_id = connection_id


class DatabaseConnectionError(PgBrowserError):
    """Exception raised when a pool cannot be created or verified.

    This includes:
    - Invalid credentials
    - Unreachable host or port
    - TLS negotiation failures
    - Connect timeout
    """

    http_status = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCode.DATABASE_CONNECTION_ERROR, details=details)


class DatabaseError(PgBrowserError):
    """Exception raised for database operation failures after a connection was obtained."""

    http_status = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize database error.

        Args:
            message: Error message describing database failure.
            details: Optional database error details.
        """
        super().__init__(message=message, code=ErrorCode.DATABASE_ERROR, details=details)

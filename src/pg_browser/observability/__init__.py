"""Observability module for the PostgreSQL browser service.

This module provides:
- Prometheus metrics collection
- Structured JSON or text logging with secret redaction
- Request ID propagation

Example:
    >>> from pg_browser.observability import configure_logging, metrics, request_context
    >>>
    >>> configure_logging(level="INFO", log_format="json")
    >>> metrics.start_metrics_server(9090)
    >>>
    >>> async with request_context() as request_id:
    ...     logger.info("Listing tables")
"""

from pg_browser.observability.logging import (
    JSONFormatter,
    SensitiveDataFilter,
    TextFormatter,
    configure_logging,
    mask_dsn,
)
from pg_browser.observability.metrics import MetricsCollector, metrics
from pg_browser.observability.tracing import (
    REQUEST_ID_HEADER,
    RequestIdFilter,
    clear_request_id,
    generate_request_id,
    get_request_id,
    request_context,
    set_request_id,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "metrics",
    # Logging
    "configure_logging",
    "mask_dsn",
    "JSONFormatter",
    "TextFormatter",
    "SensitiveDataFilter",
    # Tracing
    "REQUEST_ID_HEADER",
    "RequestIdFilter",
    "request_context",
    "generate_request_id",
    "get_request_id",
    "set_request_id",
    "clear_request_id",
]

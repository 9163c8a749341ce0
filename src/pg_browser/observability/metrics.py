"""Prometheus metrics collector for the PostgreSQL browser service.

This module implements metrics collection using prometheus_client, tracking
HTTP requests, connection registry size, connect attempts and database
query latency.
"""

from prometheus_client import Counter, Gauge, Histogram, start_http_server


class MetricsCollector:
    """Centralized metrics collector using Prometheus client.

    Metrics Categories:
    - HTTP metrics: request counts and durations per route
    - Registry metrics: live connections and connect attempts
    - Database metrics: query duration per operation

    Example:
        >>> metrics = MetricsCollector()
        >>> metrics.increment_connect_attempt(status="success")
        >>> with metrics.db_query_duration.labels(operation="list_tables").time():
        ...     await introspector.list_tables()
    """

    _instance: "MetricsCollector | None" = None

    def __new__(cls) -> "MetricsCollector":
        """Ensure singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize_metrics()
        return cls._instance

    def _initialize_metrics(self) -> None:
        # HTTP Metrics
        self.http_requests: Counter = Counter(
            "pg_browser_http_requests_total",
            "Total number of HTTP requests handled",
            labelnames=["method", "route", "status"],
        )

        self.http_request_duration: Histogram = Histogram(
            "pg_browser_http_request_duration_seconds",
            "HTTP request processing duration in seconds",
            labelnames=["method", "route"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
        )

        # Registry Metrics
        self.connections_active: Gauge = Gauge(
            "pg_browser_connections_active",
            "Number of registered database connections",
        )

        self.connect_attempts: Counter = Counter(
            "pg_browser_connect_attempts_total",
            "Total number of connect-and-verify attempts",
            labelnames=["status"],
        )

        # Database Metrics
        self.db_query_duration: Histogram = Histogram(
            "pg_browser_db_query_duration_seconds",
            "Database query execution duration in seconds",
            labelnames=["operation"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0),
        )

    def start_metrics_server(self, port: int) -> None:
        """Start the Prometheus metrics HTTP server.

        Args:
            port: Port number to listen on for metrics scraping.
        """
        start_http_server(port)

    def observe_http_request(self, method: str, route: str, status: int, duration: float) -> None:
        """Record one handled HTTP request.

        Args:
            method: HTTP method.
            route: Route template (not the raw path, to bound label cardinality).
            status: Response status code.
            duration: Duration in seconds.
        """
        self.http_requests.labels(method=method, route=route, status=str(status)).inc()
        self.http_request_duration.labels(method=method, route=route).observe(duration)

    def set_connections_active(self, count: int) -> None:
        """Set the number of registered connections."""
        self.connections_active.set(count)

    def increment_connect_attempt(self, status: str) -> None:
        """Increment connect attempt counter.

        Args:
            status: Attempt outcome (success, error).
        """
        self.connect_attempts.labels(status=status).inc()

    def observe_db_query_duration(self, operation: str, duration: float) -> None:
        """Record database query duration.

        Args:
            operation: Logical operation (list_tables, read_page, ...).
            duration: Duration in seconds.
        """
        self.db_query_duration.labels(operation=operation).observe(duration)


# Singleton instance
metrics = MetricsCollector()

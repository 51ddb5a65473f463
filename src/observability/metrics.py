"""Prometheus metrics for the search service.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Search tool latency, outcomes and result sizes
- Embedding provider latency
- Similarity store operation latency
"""

import time
from collections.abc import Awaitable, Callable, Container

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

UNKNOWN_TOOL_ENDPOINT = "/tools/{name}"

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Search Metrics
SEARCH_DURATION = Histogram(
    "search_duration_seconds",
    "Search pipeline duration in seconds",
    ["status"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

SEARCH_TOTAL = Counter(
    "searches_total",
    "Total search requests",
    ["status"],
)

SEARCH_RESULTS_RETURNED = Histogram(
    "search_results_returned",
    "Number of results returned per search",
    buckets=[0, 1, 2, 3, 5, 10, 20],
)

SEARCH_TOP_SIMILARITY = Histogram(
    "search_top_similarity",
    "Top similarity score per search",
    buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

# Similarity Store Metrics
STORE_OPERATION_DURATION = Histogram(
    "store_operation_duration_seconds",
    "Similarity store operation duration",
    ["operation", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp, tool_names: Container[str] = ()) -> None:
        """Initialize the middleware.

        Args:
            app: Wrapped ASGI app.
            tool_names: Registered tools; other `/tools/` paths share one label.
        """
        super().__init__(app)
        self._tool_names = tool_names

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        if path.startswith("/tools/"):
            # Unknown tool names must not mint new series
            name = path.removeprefix("/tools/")
            return path if name in self._tool_names else UNKNOWN_TOOL_ENDPOINT
        if path == "/discovery":
            return path
        return "other"


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_search_request(
    duration: float,
    results: int = 0,
    top_similarity: float | None = None,
    success: bool = True,
) -> None:
    """Track one search pipeline run.

    Args:
        duration: Pipeline duration in seconds.
        results: Number of results returned.
        top_similarity: Highest similarity in the results, if any.
        success: Whether the search succeeded.
    """
    status = "success" if success else "error"

    SEARCH_DURATION.labels(status=status).observe(duration)
    SEARCH_TOTAL.labels(status=status).inc()

    if success:
        SEARCH_RESULTS_RETURNED.observe(results)
        if top_similarity is not None:
            SEARCH_TOP_SIMILARITY.observe(top_similarity)


def track_embedding_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        model: Embedding model name.
        duration: Request duration in seconds.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_store_operation(
    operation: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track similarity store operation latency.

    Args:
        operation: Operation name (e.g. "nearest_neighbors", "ping").
        duration: Operation duration in seconds.
        success: Whether the operation succeeded.
    """
    status = "success" if success else "error"
    STORE_OPERATION_DURATION.labels(operation=operation, status=status).observe(
        duration
    )

"""Observability module for metrics and monitoring."""

from src.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    track_embedding_request,
    track_search_request,
    track_store_operation,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "track_embedding_request",
    "track_search_request",
    "track_store_operation",
]

"""Tests for observability module."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    track_embedding_request,
    track_search_request,
    track_store_operation,
)


class TestMetricsEndpoint:
    """Tests for /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_metrics_endpoint_returns_prometheus_format(
        self, client: AsyncClient
    ) -> None:
        """Metrics endpoint returns Prometheus format."""
        await client.get("/health")
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert b"http_requests_total" in response.content

    @pytest.mark.asyncio
    async def test_search_request_is_tracked(self, client: AsyncClient) -> None:
        """A tool call records search metrics."""
        await client.post("/tools/phase2-search", json={"query": "homepage redesign"})

        metrics = get_metrics().decode()
        assert 'searches_total{status="success"}' in metrics
        assert "search_results_returned" in metrics


class TestMetricsFunctions:
    """Tests for metrics tracking functions."""

    def test_get_metrics_returns_bytes(self) -> None:
        """get_metrics returns bytes."""
        assert isinstance(get_metrics(), bytes)

    def test_track_search_failure(self) -> None:
        """Failed searches are counted under the error status."""
        track_search_request(duration=0.2, success=False)
        assert 'searches_total{status="error"}' in get_metrics().decode()

    def test_track_embedding_request(self) -> None:
        """Embedding requests are recorded per model."""
        track_embedding_request(model="text-embedding-3-small", duration=0.1)

        metrics = get_metrics().decode()
        assert "embedding_request_duration_seconds" in metrics
        assert 'model="text-embedding-3-small"' in metrics

    def test_track_store_operation(self) -> None:
        """Store operations are recorded by name and status."""
        track_store_operation("ping", duration=0.01, success=False)

        metrics = get_metrics().decode()
        assert 'operation="ping"' in metrics


class TestEndpointNormalization:
    """Tests for metrics path normalization."""

    def _middleware(self) -> MetricsMiddleware:
        return MetricsMiddleware(AsyncMock(), tool_names={"phase2-search"})

    def test_health_paths_grouped(self) -> None:
        assert self._middleware()._normalize_endpoint("/health/live") == "/health"

    def test_registered_tool_path_kept(self) -> None:
        endpoint = self._middleware()._normalize_endpoint("/tools/phase2-search")
        assert endpoint == "/tools/phase2-search"

    def test_unknown_tool_paths_share_label(self) -> None:
        """Unregistered tool names collapse to one label."""
        middleware = self._middleware()
        assert middleware._normalize_endpoint("/tools/nope") == "/tools/{name}"
        assert middleware._normalize_endpoint("/tools/a/b") == "/tools/{name}"

    def test_other_paths_collapsed(self) -> None:
        assert self._middleware()._normalize_endpoint("/random/path") == "other"

    @pytest.mark.asyncio
    async def test_unknown_tools_do_not_add_series(self, client: AsyncClient) -> None:
        """Calls to unknown tools never create per-name series."""
        for name in ("unregistered-a", "unregistered-b", "unregistered-c"):
            response = await client.post(f"/tools/{name}", json={})
            assert response.status_code == 404

        lines = [
            line
            for line in get_metrics().decode().splitlines()
            if line.startswith("http_requests_total{") and 'status_code="404"' in line
        ]
        assert not any("unregistered" in line for line in lines)
        assert len([line for line in lines if 'endpoint="/tools/{name}"' in line]) == 1

"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.config import SearchSettings, Settings
from src.embeddings.models import EmbeddingResult
from src.search.service import SearchOrchestrator
from src.vectorstore.models import Document, ScoredDocument


@pytest.fixture
def embedder() -> AsyncMock:
    """Embedding provider returning a fixed vector."""
    mock = AsyncMock()
    mock.embed = AsyncMock(
        return_value=EmbeddingResult(
            text="homepage redesign",
            embedding=[0.1, 0.2, 0.3],
            model="text-embedding-3-small",
            dimensions=3,
        )
    )
    return mock


@pytest.fixture
def store() -> AsyncMock:
    """Similarity store with two matches and a healthy probe."""
    mock = AsyncMock()
    mock.nearest_neighbors = AsyncMock(
        return_value=[
            ScoredDocument(
                document=Document(
                    id="1",
                    content="Homepage redesign for a university",
                    drupal_entity_id="101",
                    drupal_long_id="node/101",
                ),
                similarity=0.82,
            ),
            ScoredDocument(
                document=Document(id="2", content="Design systems at scale"),
                similarity=0.61,
            ),
        ]
    )
    mock.ping = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def app(embedder: AsyncMock, store: AsyncMock) -> FastAPI:
    """Application with started-state services replaced by mocks.

    The lifespan is not run by ASGITransport, so state is set directly.
    """
    application = create_app()
    settings = Settings(match_threshold=0.5, search=SearchSettings())
    application.state.store = store
    application.state.orchestrator = SearchOrchestrator(embedder, store, settings)
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for the FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

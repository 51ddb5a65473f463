"""Embedding provider interface and OpenAI-compatible implementation."""

import time
from abc import ABC, abstractmethod

import httpx

from src.config import EmbeddingSettings, get_settings
from src.embeddings.models import EmbeddingResult
from src.exceptions import ErrorCode, ProviderError
from src.logging_config import get_logger
from src.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class Embedder(ABC):
    """Abstract base class for embedding providers.

    One call produces one vector; implementations keep no per-text state.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate the embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            ProviderError: If the provider call fails or returns no vector.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    async def close(self) -> None:
        """Release provider resources."""
        return None


class OpenAIEmbedder(Embedder):
    """Embedder backed by an OpenAI-style `/embeddings` HTTP API."""

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the embedder.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().embedding
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None:
            headers = {}
            if self._settings.api_key is not None:
                token = self._settings.api_key.get_secret_value()
                headers["Authorization"] = f"Bearer {token}"
            self._client = httpx.AsyncClient(
                base_url=self._settings.base_url,
                headers=headers,
                timeout=self._settings.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate the embedding for a single text."""
        client = self._get_client()
        payload = {"input": text, "model": self._settings.model}
        start = time.perf_counter()

        try:
            response = await client.post("/embeddings", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            track_embedding_request(
                self.model_name, time.perf_counter() - start, success=False
            )
            logger.error(
                f"Embedding request failed: {e.response.status_code}",
                extra={"status": e.response.status_code},
            )
            raise ProviderError(
                f"Embedding provider returned {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            track_embedding_request(
                self.model_name, time.perf_counter() - start, success=False
            )
            logger.error(f"Embedding request error: {e}")
            raise ProviderError(
                f"Failed to connect to embedding provider: {e}",
                details={"base_url": self._settings.base_url},
            ) from e

        try:
            data = response.json()
            embedding = data["data"][0]["embedding"]
            result = EmbeddingResult(
                text=text,
                embedding=embedding,
                model=data.get("model", self._settings.model),
                dimensions=len(embedding),
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            track_embedding_request(
                self.model_name, time.perf_counter() - start, success=False
            )
            raise ProviderError(
                f"Embedding provider returned no vector: {e}",
                code=ErrorCode.EMPTY_EMBEDDING,
                details={"error": str(e)},
            ) from e

        track_embedding_request(self.model_name, time.perf_counter() - start)
        logger.debug(
            "Embedded query",
            extra={"text_length": len(text), "dimensions": result.dimensions},
        )
        return result

"""Similarity store interface and Qdrant implementation."""

import time
from abc import ABC, abstractmethod

from src.config import QdrantSettings, get_settings
from src.exceptions import DecodeError, StoreUnavailableError
from src.logging_config import get_logger
from src.observability.metrics import track_store_operation
from src.vectorstore.models import ScoredDocument, decode_point
from src.vectorstore.pool import ConnectionManager

logger = get_logger(__name__)


class SimilarityStore(ABC):
    """Abstract base class for similarity stores.

    Documents are read-only; the store answers nearest-neighbour queries
    and a reachability probe.
    """

    @abstractmethod
    async def nearest_neighbors(
        self,
        vector: list[float],
        threshold: float,
        limit: int,
    ) -> list[ScoredDocument]:
        """Find the documents closest to a query vector.

        Args:
            vector: Query embedding.
            threshold: Exclusive lower bound on similarity.
            limit: Maximum rows to return.

        Returns:
            Matches ordered by descending similarity, all above threshold.

        Raises:
            StoreUnavailableError: If the store cannot be reached or
                rejects the query.
            DecodeError: If a returned row is malformed.
        """
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Check the store is reachable.

        Raises:
            StoreUnavailableError: If the probe fails.
        """
        ...

    async def close(self) -> None:
        """Release store resources."""
        return None


class QdrantSimilarityStore(SimilarityStore):
    """Qdrant-backed similarity store over a cosine-distance collection."""

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        connections: ConnectionManager | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            settings: Qdrant configuration.
            connections: Connection manager (created from settings if omitted).
        """
        self._settings = settings or get_settings().qdrant
        self._connections = connections or ConnectionManager(self._settings)

    @property
    def collection(self) -> str:
        return self._settings.collection_name

    async def close(self) -> None:
        await self._connections.close()

    async def nearest_neighbors(
        self,
        vector: list[float],
        threshold: float,
        limit: int,
    ) -> list[ScoredDocument]:
        """Query the collection by cosine similarity."""
        if limit <= 0:
            return []

        start = time.perf_counter()
        try:
            async with self._connections.lease() as client:
                response = await client.query_points(
                    collection_name=self.collection,
                    query=vector,
                    limit=limit,
                    score_threshold=threshold,
                    with_payload=True,
                    with_vectors=False,
                )
        except StoreUnavailableError:
            track_store_operation(
                "nearest_neighbors", time.perf_counter() - start, success=False
            )
            raise
        except Exception as e:
            track_store_operation(
                "nearest_neighbors", time.perf_counter() - start, success=False
            )
            raise StoreUnavailableError(
                f"Similarity query failed: {e}",
                details={"collection": self.collection, "error": str(e)},
            ) from e

        try:
            matches = [decode_point(point) for point in response.points]
        except DecodeError:
            track_store_operation(
                "nearest_neighbors", time.perf_counter() - start, success=False
            )
            raise

        track_store_operation("nearest_neighbors", time.perf_counter() - start)

        # Qdrant treats score_threshold as inclusive.
        matches = [m for m in matches if m.similarity > threshold]
        matches.sort(key=lambda m: m.similarity, reverse=True)

        logger.debug(
            f"Store returned {len(matches)} matches",
            extra={"collection": self.collection, "limit": limit},
        )
        return matches[:limit]

    async def ping(self) -> None:
        """Probe the server by listing collections."""
        start = time.perf_counter()
        try:
            async with self._connections.lease() as client:
                await client.get_collections()
        except StoreUnavailableError:
            track_store_operation("ping", time.perf_counter() - start, success=False)
            raise
        except Exception as e:
            track_store_operation("ping", time.perf_counter() - start, success=False)
            raise StoreUnavailableError(
                f"Similarity store unreachable: {e}",
                details={"url": self._settings.url, "error": str(e)},
            ) from e

        track_store_operation("ping", time.perf_counter() - start)

"""Search orchestrator: query -> embedding -> similarity store -> response."""

import time

from src.config import Settings, get_settings
from src.embeddings.service import Embedder
from src.exceptions import SearchFailed, SearchServiceError, ValidationError
from src.logging_config import get_logger
from src.observability.metrics import track_search_request
from src.search.models import Query, ScoredResult, SearchResponse
from src.vectorstore.service import SimilarityStore

logger = get_logger(__name__)

FAILURE_PREFIX = "Failed to search Phase2 content"


class SearchOrchestrator:
    """Runs the semantic search pipeline.

    Each call embeds the query once and issues one store query. The match
    threshold and limit bounds are fixed at construction.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: SimilarityStore,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            embedder: Embedding provider.
            store: Similarity store.
            settings: Application settings (threshold and limits).
        """
        settings = settings or get_settings()
        self._embedder = embedder
        self._store = store
        self._match_threshold = settings.match_threshold
        self._default_limit = settings.search.default_limit
        self._max_limit = settings.search.max_limit

    @property
    def match_threshold(self) -> float:
        return self._match_threshold

    @property
    def max_limit(self) -> int:
        return self._max_limit

    def resolve_limit(self, limit: int | None) -> int:
        """Apply the default limit and reject out-of-range values.

        Raises:
            ValidationError: If limit is outside [0, max_limit].
        """
        if limit is None:
            return self._default_limit
        if limit < 0 or limit > self._max_limit:
            raise ValidationError(
                f"limit must be between 0 and {self._max_limit}",
                details={"limit": limit, "max_limit": self._max_limit},
            )
        return limit

    async def search(self, query: Query) -> SearchResponse:
        """Execute a search.

        Args:
            query: The accepted query.

        Returns:
            SearchResponse with results above the match threshold.

        Raises:
            ValidationError: If the limit is out of range.
            SearchFailed: If the embedding provider or the store fails.
        """
        limit = self.resolve_limit(query.limit)
        start = time.perf_counter()

        logger.info(
            "Processing search",
            extra={"query_length": len(query.text), "limit": limit},
        )

        try:
            embedding = await self._embedder.embed(query.text)
            matches = await self._store.nearest_neighbors(
                embedding.embedding,
                threshold=self._match_threshold,
                limit=limit,
            )
        except Exception as e:
            track_search_request(time.perf_counter() - start, success=False)
            if isinstance(e, SearchServiceError):
                message, cause = e.message, e.code.value
            else:
                message, cause = str(e) or "Unknown error occurred", type(e).__name__
            logger.error(
                f"Search error: {message}",
                extra={"cause": cause},
                exc_info=not isinstance(e, SearchServiceError),
            )
            raise SearchFailed(
                f"{FAILURE_PREFIX}: {message}",
                details={"cause": cause},
            ) from e

        results = [ScoredResult.from_scored_document(m) for m in matches]
        response = SearchResponse.from_results(query.text, results)

        track_search_request(
            time.perf_counter() - start,
            results=response.count,
            top_similarity=results[0].similarity if results else None,
        )
        logger.info("Search completed", extra={"count": response.count})

        return response

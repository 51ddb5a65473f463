"""Request-scoped access to process-wide services."""

from fastapi import HTTPException, Request, status

from src.search.service import SearchOrchestrator
from src.vectorstore.service import SimilarityStore


def get_orchestrator(request: Request) -> SearchOrchestrator:
    """Get the search orchestrator created at startup.

    Raises:
        HTTPException: 503 if the service has not been started.
    """
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "Search pipeline not configured",
                "message": "The search tool requires the embedding provider and similarity store",
            },
        )
    return orchestrator


def get_store(request: Request) -> SimilarityStore | None:
    """Get the similarity store created at startup, if any."""
    return getattr(request.app.state, "store", None)

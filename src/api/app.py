"""FastAPI application entry point.

Wires the search tool, discovery, health checks, metrics and exception
handling. Process-wide clients are created in the lifespan and closed on
shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from src import __version__
from src.api.dependencies import get_store
from src.config import get_settings
from src.embeddings.service import OpenAIEmbedder
from src.exceptions import ConfigurationError, ErrorCode, SearchServiceError
from src.logging_config import get_logger, setup_logging
from src.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)
from src.search.service import SearchOrchestrator
from src.tools import search_tool  # noqa: F401  registers phase2-search
from src.tools.registry import registry
from src.tools.router import create_tools_router
from src.vectorstore.pool import ConnectionManager
from src.vectorstore.service import QdrantSimilarityStore

logger = get_logger(__name__)

HEALTHY = {"status": "healthy", "database": "connected"}
UNHEALTHY = {"status": "unhealthy", "database": "disconnected"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Validates configuration before serving, then owns the embedding client
    and the store connections for the life of the process.

    Raises:
        ConfigurationError: If a required credential is missing.
    """
    # Startup
    settings = get_settings()
    setup_logging(level=settings.log_level)

    try:
        settings.require_credentials()
    except ConfigurationError as e:
        logger.critical(e.message, extra={"details": e.details})
        raise

    embedder = OpenAIEmbedder(settings.embedding)
    try:
        connections = ConnectionManager(settings.qdrant)
        connections.open()
        store = QdrantSimilarityStore(settings.qdrant, connections)
    except Exception:
        logger.exception("Failed to open store connections")
        await embedder.close()
        raise

    app.state.embedder = embedder
    app.state.store = store
    app.state.orchestrator = SearchOrchestrator(embedder, store, settings)

    base = f"http://localhost:{settings.port}"
    logger.info(
        f"Phase2 Search service running on port {settings.port}",
        extra={"version": __version__, "environment": settings.environment.value},
    )
    logger.info(f"Discovery endpoint: {base}/discovery")
    logger.info(f"Health check: {base}/health")

    try:
        yield
    finally:
        # Shutdown
        logger.info("Shutting down, closing store connections")
        app.state.orchestrator = None
        await store.close()
        await embedder.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Phase2 Search",
        description="Semantic search over Phase2 Technology website content",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # Register middleware
    app.add_middleware(MetricsMiddleware, tool_names=registry)

    # Register exception handlers
    app.add_exception_handler(SearchServiceError, search_exception_handler)

    # Register routes
    app.include_router(create_tools_router(registry))
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics, methods=["GET"], include_in_schema=False)

    return app


async def search_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert SearchServiceError exceptions to structured JSON responses."""
    if not isinstance(exc, SearchServiceError):
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": str(exc),
                    "details": {},
                }
            },
        )

    logger.error(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=_get_status_code(exc.code),
        content=exc.to_dict(),
    )


def _get_status_code(code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    if code is ErrorCode.VALIDATION_ERROR:
        return 400
    return 500


async def health_check(request: Request) -> JSONResponse:
    """Report whether the similarity store is reachable.

    Never raises; any probe failure becomes a 503.
    """
    store = get_store(request)
    if store is None:
        return JSONResponse(status_code=503, content=UNHEALTHY)

    try:
        await store.ping()
    except Exception as e:
        logger.warning(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content=UNHEALTHY)

    return JSONResponse(status_code=200, content=HEALTHY)


async def liveness_check() -> dict[str, str]:
    """Process liveness probe. Does not touch the store."""
    return {"status": "alive"}


async def metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()

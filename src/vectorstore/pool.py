"""Process-scoped Qdrant connection manager with scoped leases."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from qdrant_client import AsyncQdrantClient

from src.config import QdrantSettings, get_settings
from src.exceptions import StoreUnavailableError
from src.logging_config import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """Owns the shared store client and hands out bounded leases.

    At most `pool_size` leases are active at once; further callers wait.
    A lease is always returned, whether the body succeeds, raises or is
    cancelled.
    """

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize the connection manager.

        Args:
            settings: Qdrant configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None
        self._semaphore = asyncio.Semaphore(self._settings.pool_size)
        self._active = 0
        self._closed = False

    @property
    def active_leases(self) -> int:
        """Number of leases currently held."""
        return self._active

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        """Create the underlying client if needed."""
        if self._closed:
            raise StoreUnavailableError("Connection manager is closed")
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value()

            self._client = AsyncQdrantClient(
                url=self._settings.url,
                api_key=api_key,
            )
            logger.info("Opened store client", extra={"url": self._settings.url})

    async def close(self) -> None:
        """Close the client. Further leases are refused."""
        self._closed = True
        if self._owns_client and self._client is not None:
            await self._client.close()
            logger.info("Closed store client")
        self._client = None

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[AsyncQdrantClient]:
        """Borrow the shared client for the duration of one operation.

        Raises:
            StoreUnavailableError: If the manager has been closed.
        """
        self.open()
        async with self._semaphore:
            client = self._client
            if client is None:
                raise StoreUnavailableError("Connection manager is closed")
            self._active += 1
            try:
                yield client
            finally:
                self._active -= 1

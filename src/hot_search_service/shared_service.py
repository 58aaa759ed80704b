"""
Lifecycle handle for the hot search service.

A ``HotSearchManager`` owns exactly one service. It is created explicitly
by whatever builds the request layer and handed to it, rather than living
in module state. The service is built on first use and, once closed, is
never rebuilt by the same manager.
"""

import asyncio
import logging

from .config import HotSearchSettings
from .services.hot_search_service import HotSearchService, create_hot_search_service
from .utils.moderation import ModerationFilter

logger = logging.getLogger(__name__)


class HotSearchManager:
    """Owns the lazily created hot search service and its shutdown."""

    def __init__(
        self,
        config: HotSearchSettings | None = None,
        moderation: ModerationFilter | None = None,
    ):
        self._config = config
        self._moderation = moderation
        self._service: HotSearchService | None = None
        self._initialization_lock: asyncio.Lock = asyncio.Lock()
        self._closed = False

    async def get_service(self) -> HotSearchService:
        """Get or create the managed service.

        Concurrent first calls result in a single backend initialization.

        Raises:
            RuntimeError: If the manager has already been closed
        """
        if self._closed:
            raise RuntimeError("HotSearchManager is closed")

        # Fast path - already initialized
        if self._service is not None:
            return self._service

        async with self._initialization_lock:
            # Double-check after acquiring lock
            if self._closed:
                raise RuntimeError("HotSearchManager is closed")
            if self._service is not None:
                return self._service

            logger.info("Initializing hot search service...")
            self._service = await create_hot_search_service(self._config, moderation=self._moderation)
            logger.info(f"Hot search service initialized in {self._service.mode} mode")
            return self._service

    def is_initialized(self) -> bool:
        return self._service is not None and not self._closed

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Close the managed service. Safe to call even if it was never created."""
        self._closed = True
        async with self._initialization_lock:
            if self._service is None:
                return
            logger.info("Closing hot search service...")
            await self._service.close()
            self._service = None
            logger.info("Hot search service closed")

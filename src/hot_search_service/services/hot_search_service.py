# Copyright 2024 Heinrich Krupp
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Hot search service.

The only component the request layer talks to. Orchestrates moderation,
storage, capacity enforcement and admin authentication. No operation here
raises to the caller: storage faults degrade to empty results or no-ops.
"""

import hmac
import logging
from collections.abc import Callable

from ..config import HotSearchSettings
from ..models.responses import AdminResult, HotSearchStats
from ..models.term_record import TermRecord
from ..storage.base import TermStorage
from ..storage.factory import create_storage_instance
from ..utils.clock import MonotonicMillisClock
from ..utils.moderation import ModerationFilter, build_moderation_filter

logger = logging.getLogger(__name__)

INCORRECT_PASSWORD = "incorrect password"
TERM_NOT_FOUND = "term not found"
SERVICE_CLOSED = "service closed"


class HotSearchService:
    """Records search terms and serves the ranked hot search list."""

    def __init__(
        self,
        storage: TermStorage,
        config: HotSearchSettings | None = None,
        moderation: ModerationFilter | None = None,
        clock: Callable[[], int] | None = None,
    ):
        """
        Args:
            storage: Initialized storage backend, chosen once for the service lifetime
            config: Hot search settings (defaults to the global settings)
            moderation: Term filter (defaults to the configured regex rules)
            clock: Returns epoch milliseconds for new/updated records
        """
        if config is None:
            from ..config import settings

            config = settings.hot_search

        self.storage = storage
        self.config = config
        self.moderation = moderation or build_moderation_filter(
            enabled=config.moderation_enabled,
            extra_patterns=config.extra_blocked_patterns,
        )
        self._clock = clock or MonotonicMillisClock()
        self._closed = False

        if config.uses_default_password:
            logger.warning("Hot search admin password is the built-in default; set HOT_SEARCH_PASSWORD")

    @property
    def mode(self) -> str:
        """Backend in use: "durable" or "transient"."""
        return self.storage.mode

    @property
    def is_closed(self) -> bool:
        return self._closed

    def is_forbidden(self, term: str) -> bool:
        """Whether the moderation filter would reject ``term``."""
        return self.moderation.is_forbidden(term)

    async def record(self, term: str) -> None:
        """
        Record one search for ``term``.

        Empty and forbidden terms are silently ignored. Storage failures
        are logged and swallowed.
        """
        if self._closed:
            logger.warning("Ignoring hot search record on closed service")
            return

        if not isinstance(term, str) or not term.strip():
            return

        if self.is_forbidden(term):
            logger.warning(f"Hot search term rejected by moderation: {term!r}")
            return

        term = term.strip()

        try:
            await self.storage.upsert_increment(term, self._clock())
        except Exception as e:
            logger.warning(f"Failed to record hot search term {term!r}: {e}")
            return

        try:
            await self.storage.enforce_capacity(self.config.max_entries)
        except Exception as e:
            logger.warning(f"Hot search capacity enforcement failed: {e}")

        logger.debug(f"Recorded hot search term: {term!r}")

    async def list_hot_searches(self, limit: int | None = None) -> list[TermRecord]:
        """
        Get the ranked hot search list.

        Args:
            limit: Maximum terms to return, clamped to [0, max_entries]
                (defaults to config.default_limit)

        Returns:
            Records ordered by score desc, then most recently accessed
        """
        if limit is None:
            limit = self.config.default_limit
        limit = max(0, min(limit, self.config.max_entries))

        if self._closed:
            logger.warning("Hot search list requested from closed service")
            return []

        try:
            return await self.storage.ranked_top(limit)
        except Exception as e:
            logger.warning(f"Hot search query failed: {e}")
            return []

    async def stats(self) -> HotSearchStats:
        """Total term count plus the top terms."""
        if self._closed:
            logger.warning("Hot search stats requested from closed service")
            return HotSearchStats()

        try:
            total = await self.storage.count()
            top_terms = await self.storage.ranked_top(min(self.config.stats_top_n, self.config.max_entries))
        except Exception as e:
            logger.warning(f"Hot search stats query failed: {e}")
            return HotSearchStats()

        return HotSearchStats(total=total, top_terms=top_terms)

    def _authenticate(self, password: str) -> bool:
        if not isinstance(password, str):
            return False
        expected = self.config.password.get_secret_value()
        # surrogatepass: lone surrogates from decoded JSON must not raise
        return hmac.compare_digest(
            password.encode("utf-8", "surrogatepass"),
            expected.encode("utf-8", "surrogatepass"),
        )

    async def admin_delete(self, term: str, password: str) -> AdminResult:
        """Delete a single term after checking the admin password."""
        if not self._authenticate(password):
            logger.warning("Hot search delete rejected: incorrect password")
            return AdminResult(success=False, message=INCORRECT_PASSWORD)

        if self._closed:
            return AdminResult(success=False, message=SERVICE_CLOSED)

        term = term.strip() if isinstance(term, str) else ""
        if not term:
            return AdminResult(success=False, message=TERM_NOT_FOUND)

        try:
            removed = await self.storage.delete_one(term)
        except Exception as e:
            logger.warning(f"Hot search delete failed for {term!r}: {e}")
            return AdminResult(success=False, message="delete failed")

        if not removed:
            return AdminResult(success=False, message=TERM_NOT_FOUND)

        logger.info(f"Deleted hot search term: {term!r}")
        return AdminResult(success=True, message=f'Hot search term "{term}" deleted', affected_count=removed)

    async def admin_clear(self, password: str) -> AdminResult:
        """Delete every term after checking the admin password."""
        if not self._authenticate(password):
            logger.warning("Hot search clear rejected: incorrect password")
            return AdminResult(success=False, message=INCORRECT_PASSWORD)

        if self._closed:
            return AdminResult(success=False, message=SERVICE_CLOSED)

        try:
            removed = await self.storage.delete_all()
        except Exception as e:
            logger.warning(f"Hot search clear failed: {e}")
            return AdminResult(success=False, message="clear failed")

        logger.info(f"Cleared {removed} hot search terms")
        return AdminResult(success=True, message=f"Cleared {removed} hot search terms", affected_count=removed)

    async def database_size(self) -> int:
        """Bytes used by the persisted store; 0 when running in memory."""
        try:
            return await self.storage.size_on_disk()
        except Exception as e:
            logger.warning(f"Could not determine hot search database size: {e}")
            return 0

    async def database_size_mb(self) -> float:
        """Database size in MiB, rounded to two decimals."""
        return round(await self.database_size() / (1024 * 1024), 2)

    async def close(self) -> None:
        """Close the storage backend. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            await self.storage.close()
        except Exception as e:
            logger.error(f"Error closing hot search storage: {e}")


async def create_hot_search_service(
    config: HotSearchSettings | None = None,
    moderation: ModerationFilter | None = None,
    clock: Callable[[], int] | None = None,
) -> HotSearchService:
    """
    Select a storage backend and build the service around it.

    The SQLite backend is tried first; on initialization failure the
    in-memory backend is used for the rest of the service lifetime.
    """
    if config is None:
        from ..config import settings

        config = settings.hot_search

    storage = await create_storage_instance(config)
    return HotSearchService(storage, config=config, moderation=moderation, clock=clock)

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
SQLite-backed ranked term storage.

Persists hot search terms in a single table using aiosqlite. Increments
are expressed as one ``INSERT ... ON CONFLICT DO UPDATE`` statement so
concurrent writers for the same term never lose an update.
"""

import logging
import os
from pathlib import Path

import aiosqlite

from ..models.term_record import TermRecord
from .base import StorageError, StorageInitializationError, TermStorage

logger = logging.getLogger(__name__)

RANKING_ORDER = "score DESC, last_accessed DESC, term ASC"


class SqliteTermStorage(TermStorage):
    """Durable ranked term storage on an embedded SQLite database."""

    mode = "durable"

    def __init__(self, db_path: str | Path):
        """
        Initialize SQLite term storage.

        Args:
            db_path: Path to SQLite database file (parent directory is created if missing)
        """
        self.db_path = Path(db_path)
        self._db: aiosqlite.Connection | None = None
        self._initialized = False

    @property
    def is_persistent(self) -> bool:
        return True

    async def initialize(self) -> None:
        """Open the database and create the schema if it does not exist."""
        if self._initialized:
            return

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            # Autocommit: every statement is its own atomic transaction
            self._db = await aiosqlite.connect(self.db_path, isolation_level=None)
            await self._db.execute(
                """
                CREATE TABLE IF NOT EXISTS hot_searches (
                    term TEXT PRIMARY KEY NOT NULL,
                    score INTEGER NOT NULL DEFAULT 1,
                    last_accessed INTEGER NOT NULL,
                    created_at INTEGER NOT NULL
                )
            """
            )
            await self._db.execute(
                "CREATE INDEX IF NOT EXISTS idx_hot_searches_rank ON hot_searches(score DESC, last_accessed DESC)"
            )
        except Exception as e:
            await self._discard_connection()
            raise StorageInitializationError(f"Failed to initialize SQLite storage at {self.db_path}: {e}") from e

        self._initialized = True
        logger.info(f"Hot search database initialized at {self.db_path}")

    async def _discard_connection(self) -> None:
        if self._db is None:
            return
        try:
            await self._db.close()
        except Exception as e:
            logger.debug(f"Ignoring error while discarding connection: {e}")
        self._db = None

    def _connection(self) -> aiosqlite.Connection:
        if self._db is None:
            raise StorageError("SQLite storage is not open")
        return self._db

    async def upsert_increment(self, term: str, timestamp: int) -> None:
        try:
            await self._connection().execute(
                """
                INSERT INTO hot_searches (term, score, last_accessed, created_at)
                VALUES (?, 1, ?, ?)
                ON CONFLICT(term) DO UPDATE SET
                    score = score + 1,
                    last_accessed = MAX(last_accessed, excluded.last_accessed)
            """,
                (term, timestamp, timestamp),
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to record term {term!r}: {e}") from e

    async def ranked_top(self, limit: int) -> list[TermRecord]:
        # Negative LIMIT means "no limit" in SQLite
        limit = max(0, limit)
        try:
            cursor = await self._connection().execute(
                f"""
                SELECT term, score, last_accessed, created_at
                FROM hot_searches
                ORDER BY {RANKING_ORDER}
                LIMIT ?
            """,
                (limit,),
            )
            rows = await cursor.fetchall()
            return [TermRecord(term=row[0], score=row[1], last_accessed=row[2], created_at=row[3]) for row in rows]
        except Exception as e:
            logger.warning(f"Hot search query failed: {e}")
            return []

    async def count(self) -> int:
        try:
            cursor = await self._connection().execute("SELECT COUNT(*) FROM hot_searches")
            row = await cursor.fetchone()
        except Exception as e:
            logger.warning(f"Hot search count failed: {e}")
            return 0
        return row[0] if row else 0

    async def delete_one(self, term: str) -> int:
        try:
            cursor = await self._connection().execute("DELETE FROM hot_searches WHERE term = ?", (term,))
        except Exception as e:
            logger.warning(f"Hot search delete failed for {term!r}: {e}")
            return 0
        return cursor.rowcount

    async def delete_all(self) -> int:
        try:
            cursor = await self._connection().execute("DELETE FROM hot_searches")
        except Exception as e:
            logger.warning(f"Hot search clear failed: {e}")
            return 0
        return cursor.rowcount

    async def enforce_capacity(self, max_entries: int) -> int:
        try:
            cursor = await self._connection().execute(
                f"""
                DELETE FROM hot_searches
                WHERE term NOT IN (
                    SELECT term FROM hot_searches
                    ORDER BY {RANKING_ORDER}
                    LIMIT ?
                )
            """,
                (max(0, max_entries),),
            )
        except Exception as e:
            logger.warning(f"Hot search capacity enforcement skipped: {e}")
            return 0

        evicted = max(0, cursor.rowcount)
        if evicted:
            logger.debug(f"Evicted {evicted} low-ranked hot search terms")
        return evicted

    async def size_on_disk(self) -> int:
        try:
            return os.path.getsize(self.db_path)
        except OSError:
            return 0

    async def close(self) -> None:
        """Close the database connection."""
        if self._db is None:
            return
        await self._db.close()
        self._db = None
        self._initialized = False
        logger.info("Hot search database closed")

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
In-memory ranked term storage.

Used when the SQLite backend cannot be initialized. Reproduces the same
ranking order and eviction rule; state is lost on restart. None of the
methods await between reading and writing a record, so each mutation is
atomic with respect to other coroutines on the event loop.
"""

import logging

from ..models.term_record import TermRecord, rank
from .base import StorageError, TermStorage

logger = logging.getLogger(__name__)


class InMemoryTermStorage(TermStorage):
    """Transient ranked term storage backed by a dict."""

    mode = "transient"

    def __init__(self):
        self._records: dict[str, TermRecord] = {}
        self._closed = False

    async def initialize(self) -> None:
        self._closed = False
        logger.info("In-memory hot search storage active (records are lost on restart)")

    async def upsert_increment(self, term: str, timestamp: int) -> None:
        if self._closed:
            raise StorageError("In-memory storage is closed")

        existing = self._records.get(term)
        if existing is not None:
            existing.score += 1
            existing.last_accessed = max(existing.last_accessed, timestamp)
        else:
            self._records[term] = TermRecord(term=term, score=1, last_accessed=timestamp, created_at=timestamp)

    async def ranked_top(self, limit: int) -> list[TermRecord]:
        if limit <= 0:
            return []
        # Copies, so callers cannot mutate stored records
        return [record.model_copy() for record in rank(list(self._records.values()))[:limit]]

    async def count(self) -> int:
        return len(self._records)

    async def delete_one(self, term: str) -> int:
        return 1 if self._records.pop(term, None) is not None else 0

    async def delete_all(self) -> int:
        removed = len(self._records)
        self._records.clear()
        return removed

    async def enforce_capacity(self, max_entries: int) -> int:
        max_entries = max(0, max_entries)
        if len(self._records) <= max_entries:
            return 0

        tail = rank(list(self._records.values()))[max_entries:]
        for record in tail:
            del self._records[record.term]

        logger.debug(f"Evicted {len(tail)} low-ranked hot search terms")
        return len(tail)

    async def close(self) -> None:
        self._records.clear()
        self._closed = True

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
Abstract storage contract for ranked terms.

Every backend must produce the same ranking order
(score desc, last_accessed desc, term asc) and apply the same
capacity eviction rule, so the service can treat them interchangeably.
"""

from abc import ABC, abstractmethod

from ..models.term_record import TermRecord


class StorageError(Exception):
    """Storage-related errors."""

    pass


class StorageInitializationError(StorageError):
    """The backend could not be opened or its schema could not be created."""

    pass


class TermStorage(ABC):
    """Abstract base class for ranked term storage backends."""

    #: Short backend identifier ("durable" / "transient")
    mode: str = "unknown"

    @property
    def is_persistent(self) -> bool:
        """Whether records survive a process restart."""
        return False

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend. Raises StorageInitializationError on failure."""
        pass

    @abstractmethod
    async def upsert_increment(self, term: str, timestamp: int) -> None:
        """
        Create the record with score 1, or increment its score and refresh last_accessed.

        Must never lose an increment under concurrent calls for the same term.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def ranked_top(self, limit: int) -> list[TermRecord]:
        """Return up to ``limit`` records in ranking order."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Total number of stored records."""
        pass

    @abstractmethod
    async def delete_one(self, term: str) -> int:
        """Remove a record. Returns 1 if it existed, else 0."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every record. Returns the number removed."""
        pass

    @abstractmethod
    async def enforce_capacity(self, max_entries: int) -> int:
        """
        Drop the lowest-ranked records beyond ``max_entries``.

        Best effort: failures are logged, not raised.

        Returns:
            Number of records evicted
        """
        pass

    async def size_on_disk(self) -> int:
        """Bytes of persisted state; 0 for non-persistent backends."""
        return 0

    async def close(self) -> None:
        """Release backend resources."""
        pass

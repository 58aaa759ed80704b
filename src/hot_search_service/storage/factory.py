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
Storage backend factory for the hot search service.

Tries the SQLite backend first and falls back to in-memory storage when it
cannot be initialized. The choice is made once per call and never revisited.
"""

import logging

from ..config import HotSearchSettings
from .base import StorageInitializationError, TermStorage
from .memory_storage import InMemoryTermStorage
from .sqlite_storage import SqliteTermStorage

logger = logging.getLogger(__name__)


async def create_storage_instance(config: HotSearchSettings | None = None) -> TermStorage:
    """
    Create and initialize the ranked term storage backend.

    Args:
        config: Hot search settings (defaults to the global settings)

    Returns:
        Initialized SqliteTermStorage, or InMemoryTermStorage if SQLite is unavailable
    """
    if config is None:
        from ..config import settings

        config = settings.hot_search

    if config.persistent:
        storage: TermStorage = SqliteTermStorage(config.db_path)
        try:
            await storage.initialize()
            logger.info(f"Hot search storage running in durable mode: {config.db_path}")
            return storage
        except StorageInitializationError as e:
            logger.warning(f"{e}. Falling back to in-memory storage; hot searches will not survive a restart")
    else:
        logger.info("Persistent hot search storage disabled by configuration")

    storage = InMemoryTermStorage()
    await storage.initialize()
    return storage

"""Hot search service: a capped, ranked store of popular search terms."""

from .config import HotSearchSettings, Settings
from .models import AdminResult, HotSearchStats, TermRecord
from .services import HotSearchService, create_hot_search_service
from .shared_service import HotSearchManager
from .storage import InMemoryTermStorage, SqliteTermStorage, StorageError, StorageInitializationError, TermStorage

__version__ = "0.1.0"

__all__ = [
    "AdminResult",
    "HotSearchManager",
    "HotSearchService",
    "HotSearchSettings",
    "HotSearchStats",
    "InMemoryTermStorage",
    "Settings",
    "SqliteTermStorage",
    "StorageError",
    "StorageInitializationError",
    "TermRecord",
    "TermStorage",
    "create_hot_search_service",
]

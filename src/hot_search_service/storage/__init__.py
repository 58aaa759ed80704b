"""Ranked term storage backends."""

from .base import StorageError, StorageInitializationError, TermStorage
from .factory import create_storage_instance
from .memory_storage import InMemoryTermStorage
from .sqlite_storage import SqliteTermStorage

__all__ = [
    "InMemoryTermStorage",
    "SqliteTermStorage",
    "StorageError",
    "StorageInitializationError",
    "TermStorage",
    "create_storage_instance",
]

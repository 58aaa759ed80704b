"""Service layer for the hot search service."""

from .hot_search_service import HotSearchService, create_hot_search_service

__all__ = ["HotSearchService", "create_hot_search_service"]

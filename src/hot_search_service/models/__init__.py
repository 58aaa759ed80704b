"""Data models for the hot search service."""

from .responses import AdminResult, HotSearchStats
from .term_record import TermRecord, now_millis, rank

__all__ = ["AdminResult", "HotSearchStats", "TermRecord", "now_millis", "rank"]

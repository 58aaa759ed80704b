"""Content moderation filters for recorded search terms.

A filter answers one question: should this term be kept out of the
hot search list? The service only depends on :class:`ModerationFilter`,
so rule sets can be swapped without touching it.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Category -> pattern. Matched case-insensitively anywhere in the term.
DEFAULT_BLOCKED_PATTERNS: dict[str, str] = {
    "political": r"政治",
    "violence": r"暴力",
    "adult": r"色情",
    "gambling": r"赌博",
    "narcotics": r"毒品",
    "profanity": r"fuck|shit|bitch",
}


class ModerationFilter(ABC):
    """Predicate deciding whether a term may be recorded."""

    @abstractmethod
    def is_forbidden(self, term: str) -> bool:
        pass


class AllowAllFilter(ModerationFilter):
    """Filter that never rejects anything."""

    def is_forbidden(self, term: str) -> bool:
        return False


class RegexModerationFilter(ModerationFilter):
    """Rejects terms matching any of a set of case-insensitive regular expressions."""

    def __init__(self, patterns: Iterable[str] | None = None):
        """
        Args:
            patterns: Regex patterns to block (defaults to DEFAULT_BLOCKED_PATTERNS)
        """
        if patterns is None:
            patterns = DEFAULT_BLOCKED_PATTERNS.values()
        self._patterns = [re.compile(p, re.IGNORECASE) for p in patterns]

    @property
    def patterns(self) -> list[str]:
        return [p.pattern for p in self._patterns]

    def is_forbidden(self, term: str) -> bool:
        return any(p.search(term) for p in self._patterns)


def build_moderation_filter(enabled: bool = True, extra_patterns: Iterable[str] = ()) -> ModerationFilter:
    """Build the filter described by configuration."""
    if not enabled:
        logger.info("Hot search moderation disabled")
        return AllowAllFilter()
    return RegexModerationFilter([*DEFAULT_BLOCKED_PATTERNS.values(), *extra_patterns])

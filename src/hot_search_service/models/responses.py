"""Service-layer response models.

Typed Pydantic results for the operations exposed to the request layer.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .term_record import TermRecord


class AdminResult(BaseModel):
    """Outcome of an authenticated delete/clear operation."""

    success: bool
    message: str
    affected_count: int = 0


class HotSearchStats(BaseModel):
    """Aggregate view of the store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    top_terms: list[TermRecord] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)

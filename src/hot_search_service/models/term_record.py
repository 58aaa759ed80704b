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

"""Ranked term model shared by every storage backend."""

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def now_millis() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


class TermRecord(BaseModel):
    """A tracked search term with its popularity counter."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    term: str = Field(min_length=1)
    score: int = Field(default=1, ge=1)
    # Epoch milliseconds
    last_accessed: int = Field(default_factory=now_millis)
    created_at: int = Field(default_factory=now_millis)

    @model_validator(mode="after")
    def _created_before_access(self) -> "TermRecord":
        if self.created_at > self.last_accessed:
            raise ValueError("created_at must not be later than last_accessed")
        return self

    def ranking_key(self) -> tuple[int, int, str]:
        """Sort key for ranking order: score desc, recency desc, then term."""
        return (-self.score, -self.last_accessed, self.term)

    def to_dict(self) -> dict[str, Any]:
        """Serialise in the camelCase shape returned to API callers."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TermRecord":
        """Create instance from either camelCase or snake_case keys."""
        return cls.model_validate(data)


def rank(records: list[TermRecord]) -> list[TermRecord]:
    """Return records sorted in ranking order."""
    return sorted(records, key=TermRecord.ranking_key)

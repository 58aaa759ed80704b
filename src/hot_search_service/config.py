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
Configuration for the hot search service.

All values can be overridden through ``HOT_SEARCH_*`` environment variables.
"""

import re
from pathlib import Path
from typing import Self

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PASSWORD = "admin123"


class HotSearchSettings(BaseSettings):
    """Ranked term store configuration."""

    model_config = SettingsConfigDict(env_prefix="HOT_SEARCH_", extra="ignore")

    db_path: Path = Field(default=Path("./data/hot-searches.db"), description="SQLite database file")
    persistent: bool = Field(default=True, description="Use the SQLite backend; False forces in-memory storage")

    max_entries: int = Field(default=50, ge=1, description="Maximum number of terms kept in the store")
    default_limit: int = Field(default=30, ge=0, description="Number of terms returned when no limit is given")
    stats_top_n: int = Field(default=10, ge=0, description="Number of terms included in stats()")

    password: SecretStr = Field(
        default=SecretStr(DEFAULT_PASSWORD),
        description="Administrative password for delete/clear operations",
    )

    moderation_enabled: bool = Field(default=True, description="Reject terms matching the blocked patterns")
    extra_blocked_patterns: list[str] = Field(
        default_factory=list,
        description="Additional case-insensitive regex patterns to block",
    )

    @field_validator("extra_blocked_patterns")
    @classmethod
    def _patterns_compile(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid blocked pattern {pattern!r}: {e}") from e
        return v

    @model_validator(mode="after")
    def _limit_within_capacity(self) -> Self:
        if self.default_limit > self.max_entries:
            raise ValueError(f"default_limit ({self.default_limit}) cannot exceed max_entries ({self.max_entries})")
        return self

    @property
    def uses_default_password(self) -> bool:
        return self.password.get_secret_value() == DEFAULT_PASSWORD


class Settings(BaseSettings):
    """Top-level settings container."""

    model_config = SettingsConfigDict(extra="ignore")

    hot_search: HotSearchSettings = Field(default_factory=HotSearchSettings)


settings = Settings()

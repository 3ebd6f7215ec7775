"""Cache configuration model.

This module contains the cache configuration model for the dual-tier
rating cache: durable storage location, default TTL and size bounds.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from ratingvault.shared.constants import Cache, CacheStorageKeys


def _default_db_path() -> Path:
    return Path.home() / Cache.DEFAULT_DIR / Cache.DEFAULT_DB_FILENAME


class CacheSettings(BaseModel):
    """Cache configuration.

    ``default_duration_hours`` only applies until a duration has been
    persisted through the cache store's setter.
    """

    db_path: Path = Field(
        default_factory=_default_db_path,
        description="SQLite file backing the durable tier",
    )
    default_duration_hours: int = Field(
        default=Cache.DEFAULT_DURATION_HOURS,
        gt=0,
        description="Cache duration used when none is persisted",
    )
    max_entries: int = Field(
        default=Cache.MAX_ENTRIES,
        gt=0,
        description="Hard cap on durable entries",
    )
    evict_count: int = Field(
        default=Cache.EVICT_COUNT,
        gt=0,
        description="Oldest entries removed in one batch when the cap is exceeded",
    )
    namespace: str = Field(
        default=CacheStorageKeys.NAMESPACE,
        description="Durable namespace for rating entries",
    )

    @model_validator(mode="after")
    def check_bounds(self) -> CacheSettings:
        if self.evict_count > self.max_entries:
            msg = "evict_count must not exceed max_entries"
            raise ValueError(msg)
        return self

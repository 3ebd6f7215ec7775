"""Cache entry and statistics models.

This module defines the dataclasses shared by the memory tier, the durable
tier and the cache store that coordinates them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ratingvault.shared.constants import Cache

T = TypeVar("T")


def epoch_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value stamped with its write time.

    Attributes:
        key: Deterministic cache key
        value: Cached payload
        stored_at: Epoch milliseconds, set once at write time
    """

    key: str
    value: T
    stored_at: int

    def age_ms(self, now: int) -> int:
        return now - self.stored_at

    def is_valid(self, now: int, duration_hours: int) -> bool:
        """Check freshness against the duration in effect at read time."""
        return self.age_ms(now) <= duration_hours * Cache.MILLIS_PER_HOUR


@dataclass(frozen=True)
class CacheStats:
    """Best-effort cache statistics."""

    total_items: int = 0
    size_estimate_bytes: int = 0
    duration_hours: int = Cache.DEFAULT_DURATION_HOURS
    memory_items: int = 0
    persistent_items: int = 0

    @property
    def size_estimate_kb(self) -> int:
        return round(self.size_estimate_bytes / Cache.BYTES_PER_KB)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalItems": self.total_items,
            "memoryItems": self.memory_items,
            "persistentItems": self.persistent_items,
            "sizeEstimateBytes": self.size_estimate_bytes,
            "sizeEstimateKb": self.size_estimate_kb,
            "durationHours": self.duration_hours,
        }


@dataclass(frozen=True)
class CacheEntryInfo:
    """Age information for one cached entry (debug listing)."""

    key: str
    stored_at: int
    age_ms: int
    is_expired: bool

    @property
    def age_hours(self) -> float:
        return round(self.age_ms / Cache.MILLIS_PER_HOUR, 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "ageMs": self.age_ms,
            "ageHours": self.age_hours,
            "isExpired": self.is_expired,
            "timestampMs": self.stored_at,
        }

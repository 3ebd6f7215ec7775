"""Dual-tier rating cache package."""

from ratingvault.services.cache.memory_store import InMemoryDurableStore
from ratingvault.services.cache.memory_tier import MemoryTier
from ratingvault.services.cache.models import (
    CacheEntry,
    CacheEntryInfo,
    CacheStats,
    epoch_millis,
)
from ratingvault.services.cache.ports import DurableStore
from ratingvault.services.cache.rating_cache import RatingCache
from ratingvault.services.cache.sqlite_store import SQLiteDurableStore

__all__ = [
    "CacheEntry",
    "CacheEntryInfo",
    "CacheStats",
    "DurableStore",
    "InMemoryDurableStore",
    "MemoryTier",
    "RatingCache",
    "SQLiteDurableStore",
    "epoch_millis",
]

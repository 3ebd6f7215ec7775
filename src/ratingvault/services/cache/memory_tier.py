"""Ephemeral (in-process) cache tier."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from ratingvault.services.cache.models import CacheEntry

T = TypeVar("T")


class MemoryTier(Generic[T]):
    """In-process map of cache entries, lost on restart.

    Only the owning cache store mutates it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CacheEntry[T]]:
        return iter(list(self._entries.values()))

    def get(self, key: str) -> CacheEntry[T] | None:
        return self._entries.get(key)

    def set(self, entry: CacheEntry[T]) -> None:
        self._entries[entry.key] = entry

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def discard_many(self, keys: list[str]) -> int:
        return sum(1 for key in keys if self.delete(key))

    def clear(self) -> int:
        removed = len(self._entries)
        self._entries.clear()
        return removed

    def expire(self, cutoff: int) -> int:
        """Remove entries stored before cutoff (epoch millis)."""
        expired = [key for key, entry in self._entries.items() if entry.stored_at < cutoff]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def evict_oldest(self, count: int, exclude: str | None = None) -> list[str]:
        """Remove the count entries with the smallest stored_at."""
        candidates = sorted(
            (entry for entry in self._entries.values() if entry.key != exclude),
            key=lambda entry: entry.stored_at,
        )
        evicted = [entry.key for entry in candidates[:count]]
        for key in evicted:
            del self._entries[key]
        return evicted

"""Dual-tier rating cache.

This module coordinates the in-process memory tier and the durable tier
behind a single cache interface. The durable tier is authoritative when it
answers; when it fails, every operation quietly degrades to the memory tier
and the failure is logged at warning level.

Entries are persisted as ``{"data": <RatingSet dict>, "timestamp": <ms>}``
encoded with orjson.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable
from types import TracebackType
from typing import Any, Callable, TypeVar

import orjson

from ratingvault.core.models import RatingSet
from ratingvault.services.cache.memory_tier import MemoryTier
from ratingvault.services.cache.models import (
    CacheEntry,
    CacheEntryInfo,
    CacheStats,
    epoch_millis,
)
from ratingvault.services.cache.ports import DurableStore
from ratingvault.shared.constants import Cache, CacheStorageKeys
from ratingvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InvalidDurationError,
    RatingVaultError,
    StorageDegradedError,
    create_storage_error,
)
from ratingvault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Marks a durable call that failed, as opposed to one that returned None
_UNAVAILABLE: Any = object()


class RatingCache:
    """TTL cache for rating sets with memory and durable tiers.

    The cache duration is read from durable storage on ``init`` and applies
    to every entry at read time, regardless of the duration in effect when
    the entry was written.

    Args:
        durable: Durable tier implementation
        memory: Memory tier (a fresh one if omitted)
        clock: Epoch-millisecond clock
        default_duration_hours: Duration used when none is persisted
        max_entries: Durable entry cap
        evict_count: Oldest entries removed in one batch when the cap is exceeded

    Example:
        >>> async with RatingCache(InMemoryDurableStore()) as cache:
        ...     await cache.set("Inception:2010", ratings)
        ...     await cache.get("Inception:2010")
    """

    def __init__(
        self,
        durable: DurableStore,
        memory: MemoryTier[RatingSet] | None = None,
        *,
        clock: Callable[[], int] = epoch_millis,
        default_duration_hours: int = Cache.DEFAULT_DURATION_HOURS,
        max_entries: int = Cache.MAX_ENTRIES,
        evict_count: int = Cache.EVICT_COUNT,
    ) -> None:
        self._durable_store = durable
        self._memory: MemoryTier[RatingSet] = memory if memory is not None else MemoryTier()
        self._clock = clock
        self._default_duration_hours = default_duration_hours
        self._duration_hours = default_duration_hours
        self._max_entries = max_entries
        self._evict_count = evict_count
        self._initialized = False

    @property
    def memory(self) -> MemoryTier[RatingSet]:
        return self._memory

    async def init(self) -> None:
        """Load the persisted cache duration."""
        stored = await self._durable(
            "load_duration",
            lambda: self._durable_store.get_setting(CacheStorageKeys.DURATION_KEY),
            None,
        )
        self._duration_hours = self._parse_duration(stored)
        self._initialized = True
        logger.debug("Rating cache initialized (duration=%dh)", self._duration_hours)

    async def dispose(self) -> None:
        await self._durable("close", self._durable_store.close, None)
        self._initialized = False

    async def __aenter__(self) -> RatingCache:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    async def get(self, key: str) -> RatingSet | None:
        """Return the cached rating set, or None on miss or expiry.

        A corrupted durable entry counts as a miss and is removed.
        """
        await self._ensure_initialized()
        now = self._clock()

        payload = await self._durable("get", lambda: self._durable_store.get(key), _UNAVAILABLE, key)
        if payload is _UNAVAILABLE or payload is None:
            return await self._get_from_memory(key, now)

        entry = self._decode(key, payload)
        if entry is None:
            await self._discard(key)
            return None

        if not entry.is_valid(now, self._duration_hours):
            logger.debug("Cache entry expired: %s", key)
            await self._discard(key)
            return None

        if key not in self._memory:
            self._remember(entry)
        return entry.value

    async def set(self, key: str, value: RatingSet) -> None:
        """Store a rating set in both tiers. Never raises on storage failure."""
        await self._ensure_initialized()
        start_time = time.time()
        entry = CacheEntry(key=key, value=value, stored_at=self._clock())

        self._remember(entry)

        payload = self._encode(entry)
        await self._durable("set", lambda: self._persist(key, payload, entry.stored_at), None, key)

        log_operation_success(
            logger,
            "cache_set",
            (time.time() - start_time) * 1000,
            result_info={"payload_bytes": len(payload)},
            context=ErrorContext(operation="cache_set", cache_key=key),
        )

    async def clear(self) -> int:
        """Empty both tiers and return the number of entries removed."""
        await self._ensure_initialized()
        memory_removed = self._memory.clear()
        durable_removed = await self._durable("clear", self._durable_store.clear, 0)
        removed = max(memory_removed, durable_removed)
        logger.info("Cache cleared: %d entries removed", removed)
        return removed

    async def get_stats(self) -> CacheStats:
        """Best-effort statistics; durable values are zero when unreachable."""
        await self._ensure_initialized()
        persistent_items = await self._durable("count", self._durable_store.count, 0)
        size_bytes = await self._durable("size_bytes", self._durable_store.size_bytes, 0)
        memory_items = len(self._memory)
        return CacheStats(
            total_items=max(memory_items, persistent_items),
            size_estimate_bytes=size_bytes,
            duration_hours=self._duration_hours,
            memory_items=memory_items,
            persistent_items=persistent_items,
        )

    async def cleanup_expired(self) -> int:
        """Remove expired entries from both tiers, returning the sum removed."""
        await self._ensure_initialized()
        cutoff = self._clock() - self._duration_hours * Cache.MILLIS_PER_HOUR
        memory_removed = self._memory.expire(cutoff)
        durable_removed = await self._durable(
            "cleanup_expired",
            lambda: self._durable_store.delete_stored_before(cutoff),
            0,
        )
        removed = memory_removed + durable_removed
        logger.info(
            "Expired cache entries removed: %d (memory=%d, durable=%d)",
            removed,
            memory_removed,
            durable_removed,
        )
        return removed

    async def get_detailed_info(self) -> list[CacheEntryInfo]:
        """List every entry with its age, oldest first."""
        await self._ensure_initialized()
        now = self._clock()
        rows = await self._durable("items", self._durable_store.items, _UNAVAILABLE)
        if rows is _UNAVAILABLE:
            stamps = [(entry.key, entry.stored_at) for entry in self._memory]
        else:
            stamps = [(key, stored_at) for key, _, stored_at in rows]

        limit_ms = self._duration_hours * Cache.MILLIS_PER_HOUR
        infos = [
            CacheEntryInfo(
                key=key,
                stored_at=stored_at,
                age_ms=now - stored_at,
                is_expired=now - stored_at > limit_ms,
            )
            for key, stored_at in stamps
        ]
        return sorted(infos, key=lambda info: info.stored_at)

    async def get_cache_duration(self) -> int:
        await self._ensure_initialized()
        return self._duration_hours

    async def set_cache_duration(self, hours: Any) -> None:
        """Change the cache duration.

        Raises:
            InvalidDurationError: If hours is not a positive integer
        """
        if isinstance(hours, bool) or not isinstance(hours, int) or hours <= 0:
            raise InvalidDurationError(
                ErrorCode.INVALID_CACHE_DURATION,
                f"Cache duration must be a positive integer, got {hours!r}",
                ErrorContext(operation="set_cache_duration"),
            )

        await self._ensure_initialized()
        self._duration_hours = hours
        await self._durable(
            "save_duration",
            lambda: self._durable_store.set_setting(CacheStorageKeys.DURATION_KEY, str(hours)),
            None,
        )
        logger.info("Cache duration set to %d hours", hours)

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.init()

    async def _get_from_memory(self, key: str, now: int) -> RatingSet | None:
        entry = self._memory.get(key)
        if entry is None:
            return None
        if not entry.is_valid(now, self._duration_hours):
            self._memory.delete(key)
            return None
        return entry.value

    def _remember(self, entry: CacheEntry[RatingSet]) -> None:
        self._memory.set(entry)
        if len(self._memory) > self._max_entries:
            self._memory.evict_oldest(self._evict_count, exclude=entry.key)

    async def _discard(self, key: str) -> None:
        self._memory.delete(key)
        await self._durable("delete", lambda: self._durable_store.delete([key]), 0, key)

    async def _persist(self, key: str, payload: bytes, stored_at: int) -> None:
        store = self._durable_store
        if not await store.contains(key) and await store.count() + 1 > self._max_entries:
            evicted = await store.oldest_keys(self._evict_count, exclude=key)
            removed = await store.delete(evicted)
            self._memory.discard_many(evicted)
            logger.info("Cache size limit reached, evicted %d oldest entries", removed)
        await store.put(key, payload, stored_at)

    async def _durable(
        self,
        operation: str,
        call: Callable[[], Awaitable[R]],
        default: R,
        cache_key: str | None = None,
    ) -> R:
        try:
            return await call()
        except StorageDegradedError as e:
            log_operation_error(logger, e, operation, level=logging.WARNING)
        except Exception as e:  # noqa: BLE001
            error = create_storage_error(
                f"Durable cache {operation} failed: {e!s}",
                operation=operation,
                original_error=e,
                cache_key=cache_key,
            )
            log_operation_error(logger, error, operation, level=logging.WARNING)
        return default

    def _parse_duration(self, stored: str | None) -> int:
        if stored is None:
            return self._default_duration_hours
        try:
            hours = int(stored)
        except ValueError:
            hours = 0
        if hours <= 0:
            logger.warning("Ignoring invalid persisted cache duration: %r", stored)
            return self._default_duration_hours
        return hours

    @staticmethod
    def _encode(entry: CacheEntry[RatingSet]) -> bytes:
        return orjson.dumps(
            {
                CacheStorageKeys.DATA: entry.value.to_dict(),
                CacheStorageKeys.TIMESTAMP: entry.stored_at,
            },
        )

    @staticmethod
    def _decode(key: str, payload: bytes) -> CacheEntry[RatingSet] | None:
        try:
            raw = orjson.loads(payload)
            timestamp = raw[CacheStorageKeys.TIMESTAMP]
            if isinstance(timestamp, bool) or not isinstance(timestamp, int):
                msg = f"timestamp must be an integer, got {timestamp!r}"
                raise TypeError(msg)
            value = RatingSet.from_dict(raw[CacheStorageKeys.DATA])
        except (ValueError, TypeError, KeyError) as e:
            error = RatingVaultError(
                ErrorCode.CACHE_CORRUPTED,
                f"Discarding corrupted cache entry: {e!s}",
                ErrorContext(operation="cache_decode", cache_key=key),
                original_error=e,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            return None
        return CacheEntry(key=key, value=value, stored_at=timestamp)

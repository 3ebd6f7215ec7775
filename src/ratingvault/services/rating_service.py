"""Rating lookup orchestration.

``RatingService`` is the single entry point for collaborators. A lookup
checks the cache, fetches from upstream on a miss and caches only
successful results. Failures come back as ``LookupResult`` values; the
service never raises from ``lookup``.

Concurrent lookups for the same key are not coalesced, so two callers
may both miss and both fetch. Upstream is idempotent and the later write
simply wins.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Protocol

from ratingvault.config.models.settings import Settings
from ratingvault.core.cache_key import derive_cache_key
from ratingvault.core.models import LookupResult, RatingSet, TitleQuery
from ratingvault.services.cache.models import CacheEntryInfo, CacheStats
from ratingvault.services.cache.rating_cache import RatingCache
from ratingvault.services.cache.sqlite_store import SQLiteDurableStore
from ratingvault.services.omdb.client import OMDbClient
from ratingvault.shared.errors import (
    FailureReason,
    InvalidDurationError,
    RatingVaultError,
    UpstreamError,
)
from ratingvault.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)

logger = logging.getLogger(__name__)


class RatingFetcher(Protocol):
    """Fetch side of the service (``OMDbClient`` or a test double)."""

    async def fetch(self, query: TitleQuery) -> RatingSet: ...

    async def close(self) -> None: ...


@dataclass(frozen=True)
class OperationResult:
    """Success flag plus data or a classified failure."""

    success: bool
    reason: FailureReason | None = None
    detail: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, **self.data}
        return {
            "success": False,
            "reason": self.reason.value if self.reason else None,
            "error": self.detail,
        }


class RatingService:
    """Coordinates the rating cache and the upstream fetch client.

    Args:
        cache: Dual-tier rating cache
        client: Upstream fetcher

    Example:
        >>> async with create_rating_service(get_config()) as service:
        ...     result = await service.lookup({"title": "Inception", "year": 2010})
    """

    def __init__(self, cache: RatingCache, client: RatingFetcher) -> None:
        self.cache = cache
        self.client = client

    async def init(self) -> None:
        await self.cache.init()

    async def dispose(self) -> None:
        """Close the upstream client and the cache."""
        try:
            await self.client.close()
        finally:
            await self.cache.dispose()

    async def __aenter__(self) -> RatingService:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.dispose()

    async def lookup(self, query: TitleQuery | Any) -> LookupResult:
        """Resolve ratings for a title.

        Args:
            query: TitleQuery or ``{"title", "year"?, "type"?}`` payload

        Returns:
            Success with ratings (``from_cache`` set on a cache hit), or a
            failure carrying a FailureReason and a readable detail
        """
        operation = "lookup"
        start_time = time.time()

        try:
            title_query = TitleQuery.from_payload(query)
        except RatingVaultError as e:
            log_operation_error(logger, e, operation, level=logging.WARNING)
            return LookupResult.failed(FailureReason.MISSING_INPUT, e.message)

        key = derive_cache_key(title_query)
        log_operation_start(logger, operation, {"cache_key": key})
        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %r", key)
            return LookupResult.ok(cached, from_cache=True)

        try:
            ratings = await self.client.fetch(title_query)
        except UpstreamError as e:
            log_operation_error(
                logger,
                e,
                operation,
                {"cache_key": key, "reason": e.reason.value},
                level=logging.WARNING,
            )
            return LookupResult.failed(e.reason, e.message)
        except Exception as e:  # noqa: BLE001
            logger.exception("Unexpected error while fetching %r", key)
            return LookupResult.failed(FailureReason.TRANSIENT_UPSTREAM_FAILURE, str(e))

        await self.cache.set(key, ratings)
        log_operation_success(
            logger,
            operation,
            (time.time() - start_time) * 1000,
            result_info={"from_cache": False},
            context={"cache_key": key},
        )
        return LookupResult.ok(ratings)

    async def clear_cache(self) -> int:
        return await self.cache.clear()

    async def get_cache_stats(self) -> CacheStats:
        return await self.cache.get_stats()

    async def set_cache_duration(self, hours: Any) -> OperationResult:
        """Change the cache duration; rejects anything but a positive int."""
        try:
            await self.cache.set_cache_duration(hours)
        except InvalidDurationError as e:
            log_operation_error(logger, e, level=logging.WARNING)
            return OperationResult(success=False, reason=e.reason, detail=e.message)
        return OperationResult(success=True, data={"durationHours": hours})

    async def get_cache_duration(self) -> int:
        return await self.cache.get_cache_duration()

    async def cleanup_expired(self) -> int:
        return await self.cache.cleanup_expired()

    async def get_detailed_info(self) -> list[CacheEntryInfo]:
        return await self.cache.get_detailed_info()


def create_rating_service(settings: Settings) -> RatingService:
    """Wire a RatingService from configuration.

    Uses the SQLite durable tier at ``settings.cache.db_path`` and an
    OMDb client built from ``settings.omdb``.
    """
    store = SQLiteDurableStore(settings.cache.db_path, namespace=settings.cache.namespace)
    cache = RatingCache(
        store,
        default_duration_hours=settings.cache.default_duration_hours,
        max_entries=settings.cache.max_entries,
        evict_count=settings.cache.evict_count,
    )
    client = OMDbClient(settings.omdb)
    logger.debug("Rating service created (db=%s)", settings.cache.db_path)
    return RatingService(cache, client)

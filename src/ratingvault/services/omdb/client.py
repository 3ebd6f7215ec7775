"""OMDb API client.

This module provides the fetch client for the upstream rating source.
It builds deterministic request parameters, runs requests through the
bounded retry loop, classifies upstream-reported failures and hands the
payload to the normalizer.

Every failure is raised as an ``UpstreamError`` subclass so that callers
can branch on ``error.reason``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from types import TracebackType
from typing import Any
from urllib.parse import urlencode

import aiohttp
import orjson

from ratingvault.config.models.omdb_settings import OMDbSettings
from ratingvault.core.models import RatingSet, TitleQuery
from ratingvault.services.omdb.models import SearchPage, SearchResult
from ratingvault.services.omdb.normalizer import normalize_ratings
from ratingvault.services.omdb.retry import SleepFunc, UpstreamStatusError, run_with_retry
from ratingvault.shared.constants import (
    MediaType,
    OMDbConfig,
    OMDbFields,
    OMDbMessages,
)
from ratingvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InvalidCredentialsError,
    NotFoundError,
    UpstreamError,
    UpstreamRejectedError,
    create_invalid_query_error,
)
from ratingvault.shared.logging import log_api_call, log_operation_success, redact_api_key

logger = logging.getLogger(__name__)


def classify_upstream_error(
    message: str,
    operation: str,
    subject: str | None = None,
) -> UpstreamError:
    """Map an upstream ``Error`` message to a classified error.

    Args:
        message: Message reported by upstream with ``Response: "False"``
        operation: Operation name for the error context
        subject: Title, id or search term being resolved

    Returns:
        NotFoundError, InvalidCredentialsError or UpstreamRejectedError
    """
    context = ErrorContext(operation=operation, additional_data={"subject": subject})
    lowered = message.lower()

    if any(marker in lowered for marker in OMDbMessages.INVALID_KEY_MARKERS):
        return InvalidCredentialsError(ErrorCode.OMDB_API_AUTHENTICATION_ERROR, message, context)
    if any(marker in lowered for marker in OMDbMessages.NOT_FOUND_MARKERS):
        return NotFoundError(ErrorCode.OMDB_API_MEDIA_NOT_FOUND, message, context)
    return UpstreamRejectedError(ErrorCode.OMDB_API_REQUEST_REJECTED, message, context)


def _is_rejection(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get(OMDbFields.RESPONSE) == OMDbFields.RESPONSE_FALSE


class OMDbClient:
    """Async client for the OMDb API.

    The client lazily creates its own ``aiohttp.ClientSession`` with a
    bounded timeout. An externally created session may be injected instead;
    the client never closes a session it did not create.

    Args:
        settings: OMDb settings (API key, endpoint, timeout, retry policy)
        session: Optional externally managed HTTP session
        sleep: Delay function used between retry attempts

    Example:
        >>> async with OMDbClient(OMDbSettings(api_key="...")) as client:
        ...     ratings = await client.fetch(TitleQuery("Inception", 2010))
    """

    def __init__(
        self,
        settings: OMDbSettings | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.settings = settings or OMDbSettings()
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep
        self._session_lock = asyncio.Lock()

        if not self.settings.api_key:
            logger.debug("OMDb client created without an API key")

    async def _get_session(self) -> aiohttp.ClientSession:
        async with self._session_lock:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
                    headers={
                        "User-Agent": OMDbConfig.USER_AGENT,
                        "Accept": "application/json",
                    },
                )
                self._owns_session = True
                logger.debug("Created OMDb HTTP session (timeout=%ss)", self.settings.timeout)
            return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        async with self._session_lock:
            if self._owns_session and self._session is not None and not self._session.closed:
                await self._session.close()
                logger.debug("Closed OMDb HTTP session")
            if self._owns_session:
                self._session = None

    async def __aenter__(self) -> OMDbClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def build_title_params(self, query: TitleQuery) -> dict[str, str]:
        """Build request parameters for a title lookup.

        Only the year and type filters that are present are included, so
        the same query always produces the same request.
        """
        params = {
            OMDbConfig.PARAM_API_KEY: self.settings.api_key,
            OMDbConfig.PARAM_TITLE: query.title.strip(),
            OMDbConfig.PARAM_PLOT: self.settings.plot,
        }
        if query.year is not None:
            params[OMDbConfig.PARAM_YEAR] = str(query.year)
        if query.media_type is not None:
            params[OMDbConfig.PARAM_TYPE] = query.media_type.value
        return params

    async def fetch(self, query: TitleQuery | Any) -> RatingSet:
        """Fetch and normalize ratings for a title.

        Args:
            query: TitleQuery or collaborator payload

        Returns:
            Normalized rating set

        Raises:
            InvalidQueryError: If the title is empty (no request is made)
            TransientUpstreamFailureError: If every attempt failed in transport
            NotFoundError: If upstream reports the title does not exist
            InvalidCredentialsError: If upstream rejects the API key
            UpstreamRejectedError: For any other upstream-reported failure
        """
        operation = "omdb_fetch"
        query = TitleQuery.from_payload(query)
        title = query.title.strip()
        if not title:
            raise create_invalid_query_error("Title is required", operation=operation)

        start_time = time.time()
        payload = await self._request(self.build_title_params(query), operation)
        if _is_rejection(payload):
            raise classify_upstream_error(self._error_message(payload), operation, title)

        ratings = normalize_ratings(payload)
        log_operation_success(
            logger,
            operation,
            (time.time() - start_time) * 1000,
            result_info={"sources": len(ratings.to_dict())},
            context={"title": title, "year": query.year},
        )
        return ratings

    async def fetch_by_imdb_id(self, imdb_id: str) -> RatingSet:
        """Fetch and normalize ratings for an IMDb id such as ``tt0111161``.

        Raises:
            InvalidQueryError: If the id does not start with ``tt``
        """
        operation = "omdb_fetch_by_id"
        if not isinstance(imdb_id, str) or not imdb_id.strip().startswith(OMDbConfig.IMDB_ID_PREFIX):
            raise create_invalid_query_error(
                f'Invalid IMDb ID format: {imdb_id!r}. Must start with "{OMDbConfig.IMDB_ID_PREFIX}"',
                operation=operation,
            )

        imdb_id = imdb_id.strip()
        params = {
            OMDbConfig.PARAM_API_KEY: self.settings.api_key,
            OMDbConfig.PARAM_IMDB_ID: imdb_id,
            OMDbConfig.PARAM_PLOT: self.settings.plot,
        }
        payload = await self._request(params, operation)
        if _is_rejection(payload):
            raise classify_upstream_error(self._error_message(payload), operation, imdb_id)
        return normalize_ratings(payload)

    async def search(
        self,
        title: str,
        year: int | None = None,
        media_type: MediaType | str | None = None,
        page: int | None = None,
    ) -> SearchPage:
        """Search titles by name.

        A search that matches nothing yields an empty page carrying the
        upstream message. A rejected API key is still raised.

        Raises:
            InvalidQueryError: If the title is empty
            InvalidCredentialsError: If upstream rejects the API key
            TransientUpstreamFailureError: If every attempt failed in transport
        """
        operation = "omdb_search"
        if not isinstance(title, str) or not title.strip():
            raise create_invalid_query_error("Title is required for search", operation=operation)

        params = {
            OMDbConfig.PARAM_API_KEY: self.settings.api_key,
            OMDbConfig.PARAM_SEARCH: title.strip(),
        }
        if year is not None:
            params[OMDbConfig.PARAM_YEAR] = str(year)
        if media_type is not None:
            if not isinstance(media_type, MediaType):
                media_type = MediaType(media_type.strip().lower())
            params[OMDbConfig.PARAM_TYPE] = media_type.value
        if page is not None:
            params[OMDbConfig.PARAM_PAGE] = str(page)

        payload = await self._request(params, operation)
        if _is_rejection(payload):
            error = classify_upstream_error(self._error_message(payload), operation, title.strip())
            if isinstance(error, InvalidCredentialsError):
                raise error
            logger.info("Search returned no results for %r: %s", title.strip(), error.message)
            return SearchPage(page=page or 1, error=error.message)

        items = payload.get(OMDbFields.SEARCH) or []
        results = [SearchResult.from_payload(item) for item in items if isinstance(item, dict)]
        try:
            total = int(payload.get(OMDbFields.TOTAL_RESULTS) or 0)
        except (TypeError, ValueError):
            total = len(results)
        logger.debug("Search for %r found %d results", title.strip(), total)
        return SearchPage(results=results, total_results=total, page=page or 1)

    async def _request(self, params: dict[str, str], operation: str) -> dict[str, Any]:
        """GET the endpoint with retry and return the decoded JSON object."""
        endpoint = redact_api_key(
            f"{self.settings.base_url}?{urlencode(params)}",
            self.settings.api_key,
        )

        async def attempt() -> dict[str, Any]:
            session = await self._get_session()
            start_time = time.time()
            async with session.get(self.settings.base_url, params=params) as response:
                body = await response.read()
                log_api_call(
                    logger,
                    endpoint,
                    "GET",
                    response.status,
                    (time.time() - start_time) * 1000,
                )
                payload = self._decode(body, operation)
                if not 200 <= response.status < 300:
                    # Keyed rejections (e.g. 401 "Invalid API key!") are final
                    if _is_rejection(payload):
                        return payload
                    raise UpstreamStatusError(response.status, response.reason)
                if payload is None:
                    raise UpstreamRejectedError(
                        ErrorCode.OMDB_API_INVALID_RESPONSE,
                        "Upstream returned a response that is not a JSON object",
                        ErrorContext(operation=operation),
                    )
                return payload

        return await run_with_retry(
            attempt,
            operation=operation,
            attempts=self.settings.retry_attempts,
            base_delay=self.settings.retry_base_delay,
            sleep=self._sleep,
        )

    @staticmethod
    def _decode(body: bytes, operation: str) -> dict[str, Any] | None:
        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError:
            logger.debug("Undecodable response body for %s", operation)
            return None
        return payload if isinstance(payload, dict) else None

    @staticmethod
    def _error_message(payload: dict[str, Any]) -> str:
        return str(payload.get(OMDbFields.ERROR) or "Unknown upstream error")

"""Request/response dispatch for collaborators.

Collaborators send ``{"type": ..., "payload": ..., "id": ...}`` messages
over whatever channel the host provides. ``MessageRouter.handle`` maps
each type to a ``RatingService`` call and always answers with a dict
carrying ``success`` and the request ``id`` when one was given.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from typing import Any, Callable

from ratingvault.services.rating_service import RatingService
from ratingvault.shared.constants import MessageTypes

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[dict[str, Any]]]


class MessageRouter:
    """Dispatches typed messages to the rating service."""

    def __init__(self, service: RatingService) -> None:
        self.service = service
        self._handlers: dict[str, Handler] = {
            MessageTypes.FETCH_RATINGS: self._fetch_ratings,
            MessageTypes.CLEAR_CACHE: self._clear_cache,
            MessageTypes.GET_CACHE_STATS: self._get_cache_stats,
            MessageTypes.SET_CACHE_DURATION: self._set_cache_duration,
            MessageTypes.GET_CACHE_DURATION: self._get_cache_duration,
            MessageTypes.CLEANUP_EXPIRED: self._cleanup_expired,
            MessageTypes.GET_CACHE_INFO: self._get_cache_info,
        }

    @property
    def message_types(self) -> list[str]:
        return list(self._handlers)

    async def handle(self, request: Any) -> dict[str, Any]:
        """Answer one request. Never raises."""
        if not isinstance(request, Mapping):
            return {"success": False, "error": MessageTypes.UNKNOWN_TYPE_ERROR}

        message_type = request.get("type")
        handler = self._handlers.get(message_type) if isinstance(message_type, str) else None
        if handler is None:
            logger.warning("Unknown message type: %r", message_type)
            response: dict[str, Any] = {
                "success": False,
                "error": MessageTypes.UNKNOWN_TYPE_ERROR,
            }
        else:
            logger.debug("Handling message %s", message_type)
            try:
                response = await handler(request.get("payload"))
            except Exception as e:  # noqa: BLE001
                logger.exception("Message %s failed", message_type)
                response = {"success": False, "error": str(e)}

        if request.get("id") is not None:
            response["id"] = request["id"]
        return response

    async def _fetch_ratings(self, payload: Any) -> dict[str, Any]:
        result = await self.service.lookup(payload)
        return result.to_dict()

    async def _clear_cache(self, payload: Any) -> dict[str, Any]:
        removed = await self.service.clear_cache()
        return {"success": True, "removedCount": removed, "cleared": removed}

    async def _get_cache_stats(self, payload: Any) -> dict[str, Any]:
        stats = await self.service.get_cache_stats()
        return {"success": True, "stats": stats.to_dict()}

    async def _set_cache_duration(self, payload: Any) -> dict[str, Any]:
        hours = payload.get("hours") if isinstance(payload, Mapping) else payload
        result = await self.service.set_cache_duration(hours)
        return result.to_dict()

    async def _get_cache_duration(self, payload: Any) -> dict[str, Any]:
        return {"success": True, "durationHours": await self.service.get_cache_duration()}

    async def _cleanup_expired(self, payload: Any) -> dict[str, Any]:
        removed = await self.service.cleanup_expired()
        return {"success": True, "removed": removed}

    async def _get_cache_info(self, payload: Any) -> dict[str, Any]:
        entries = await self.service.get_detailed_info()
        return {"success": True, "entries": [entry.to_dict() for entry in entries]}

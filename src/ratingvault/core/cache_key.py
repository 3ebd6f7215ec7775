"""Deterministic cache key derivation.

The same logical query always yields the same key: the title is trimmed,
the year and media type are appended only when present, and the parts are
joined with a fixed delimiter. Reads and writes share this single rule.
"""

from __future__ import annotations

from typing import Any

from ratingvault.core.models import TitleQuery
from ratingvault.shared.constants import Cache


def derive_cache_key(query: TitleQuery | Any) -> str:
    """Derive the cache key for a title query.

    Args:
        query: A TitleQuery or a collaborator payload accepted by
            ``TitleQuery.from_payload``

    Returns:
        Key such as ``"Inception:2010"`` or ``"Breaking Bad:series"``

    Example:
        >>> derive_cache_key({"title": " Inception ", "year": 2010})
        'Inception:2010'
        >>> derive_cache_key({"title": "Inception"})
        'Inception'
    """
    query = TitleQuery.from_payload(query)

    parts = [query.title.strip()]
    if query.year is not None:
        parts.append(str(query.year))
    if query.media_type is not None:
        parts.append(query.media_type.value)
    return Cache.KEY_DELIMITER.join(parts)

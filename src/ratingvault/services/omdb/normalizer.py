"""Upstream payload normalization.

``normalize_ratings`` is the only place that knows the OMDb response shape:
direct fields for IMDb and Metacritic, a ``Ratings`` list for Rotten
Tomatoes, and the ``"N/A"`` sentinel for missing values. Everything
downstream works with ``RatingSet``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ratingvault.core.models import (
    ImdbRating,
    MetacriticRating,
    RatingSet,
    RottenTomatoesRating,
)
from ratingvault.shared.constants import OMDbFields

logger = logging.getLogger(__name__)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() in ("", OMDbFields.NOT_APPLICABLE)


def _parse_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, (int, float)):
        return float(value)
    return float(str(value).strip())


def _parse_int(value: Any, *, strip: str = "") -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    for char in strip:
        text = text.replace(char, "")
    return int(text)


def _imdb(payload: Mapping[str, Any]) -> ImdbRating | None:
    raw_score = payload.get(OMDbFields.IMDB_RATING)
    if _is_missing(raw_score):
        return None

    votes = 0
    votes_raw = payload.get(OMDbFields.IMDB_VOTES)
    if not _is_missing(votes_raw):
        try:
            votes = _parse_int(votes_raw, strip=",")
        except ValueError:
            logger.debug("Ignoring malformed IMDb vote count: %r", votes_raw)
        if votes < 0:
            logger.debug("Ignoring negative IMDb vote count: %r", votes_raw)
            votes = 0

    try:
        return ImdbRating(score=_parse_float(raw_score), vote_count=votes)
    except ValueError:
        logger.debug("Ignoring malformed IMDb rating: %r", raw_score)
        return None


def _metacritic(payload: Mapping[str, Any]) -> MetacriticRating | None:
    raw_score = payload.get(OMDbFields.METASCORE)
    if _is_missing(raw_score):
        return None

    try:
        return MetacriticRating(score=_parse_int(raw_score))
    except ValueError:
        logger.debug("Ignoring malformed Metascore: %r", raw_score)
        return None


def _rotten_tomatoes(payload: Mapping[str, Any]) -> RottenTomatoesRating | None:
    ratings = payload.get(OMDbFields.RATINGS)
    if not isinstance(ratings, list):
        return None

    for rating in ratings:
        if not isinstance(rating, Mapping):
            continue
        if rating.get(OMDbFields.RATING_SOURCE) != OMDbFields.SOURCE_ROTTEN_TOMATOES:
            continue
        raw_value = rating.get(OMDbFields.RATING_VALUE)
        if _is_missing(raw_value):
            return None
        try:
            return RottenTomatoesRating(score=_parse_int(raw_value, strip="%"))
        except ValueError:
            logger.debug("Ignoring malformed Rotten Tomatoes value: %r", raw_value)
            return None
    return None


def normalize_ratings(payload: Mapping[str, Any]) -> RatingSet:
    """Convert an OMDb title payload into a RatingSet.

    ``"N/A"`` or missing values leave the source absent; malformed values
    are dropped with a debug log. The function is pure, so normalizing the
    same payload twice yields equal results.

    Args:
        payload: Decoded OMDb response object

    Returns:
        Canonical rating set

    Example:
        >>> normalize_ratings({
        ...     "imdbRating": "9.3",
        ...     "imdbVotes": "2,900,000",
        ...     "Metascore": "82",
        ...     "Ratings": [{"Source": "Rotten Tomatoes", "Value": "89%"}],
        ... }).to_dict()
        {'imdb': {'score': 9.3, 'voteCount': 2900000}, 'metacritic': {'score': 82}, 'rottenTomatoes': {'score': 89}}
    """
    ratings = RatingSet(
        imdb=_imdb(payload),
        metacritic=_metacritic(payload),
        rotten_tomatoes=_rotten_tomatoes(payload),
    )
    logger.debug(
        "Ratings extracted for %s: %s",
        payload.get(OMDbFields.TITLE, "Unknown"),
        ", ".join(ratings.to_dict()) or "None",
    )
    return ratings

"""Rating value models.

This module defines the canonical, upstream-agnostic rating representation
(``RatingSet``) together with the query and result types exchanged with
collaborators.

``RatingSet`` uses Pydantic because it crosses the durable-storage boundary
and must be re-validated when read back; the query and result types are
plain dataclasses.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ratingvault.shared.constants import MediaType
from ratingvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    FailureReason,
    RatingVaultError,
)


class _RatingModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class ImdbRating(_RatingModel):
    """IMDb user rating.

    Attributes:
        score: 0.0-10.0 with the one-decimal precision supplied upstream
        vote_count: Number of votes (0 when upstream omits it)
    """

    score: float = Field(..., ge=0.0, le=10.0)
    vote_count: int = Field(default=0, ge=0, alias="voteCount")


class MetacriticRating(_RatingModel):
    """Metascore, 0-100."""

    score: int = Field(..., ge=0, le=100)


class RottenTomatoesRating(_RatingModel):
    """Tomatometer percentage, 0-100."""

    score: int = Field(..., ge=0, le=100)


class RatingSet(_RatingModel):
    """Canonical rating set produced by normalization.

    A source is present only if upstream supplied a real value for it;
    ``None`` means unknown, never zero. Instances are immutable.

    Example:
        >>> ratings = RatingSet(imdb=ImdbRating(score=9.3, vote_count=2900000))
        >>> ratings.to_dict()
        {'imdb': {'score': 9.3, 'voteCount': 2900000}}
    """

    imdb: ImdbRating | None = None
    metacritic: MetacriticRating | None = None
    rotten_tomatoes: RottenTomatoesRating | None = Field(
        default=None,
        alias="rottenTomatoes",
    )

    def is_empty(self) -> bool:
        """Return True if no source supplied a rating."""
        return self.imdb is None and self.metacritic is None and self.rotten_tomatoes is None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted/wire field names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RatingSet:
        """Validate a persisted/wire dict.

        Raises:
            pydantic.ValidationError: If the dict does not have the expected shape
        """
        return cls.model_validate(dict(data))


def _coerce_year(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        msg = "year must be an integer"
        raise ValueError(msg)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    msg = f"year must be an integer, got {value!r}"
    raise ValueError(msg)


def _coerce_media_type(value: Any) -> MediaType | None:
    if value is None or value == "":
        return None
    if isinstance(value, MediaType):
        return value
    if isinstance(value, str):
        return MediaType(value.strip().lower())
    msg = f"media type must be a string, got {type(value).__name__}"
    raise ValueError(msg)


@dataclass(frozen=True)
class TitleQuery:
    """Title lookup request.

    Attributes:
        title: Title as scraped by the collaborator (trimmed only when used)
        year: Optional release year
        media_type: Optional upstream type filter
    """

    title: str
    year: int | None = None
    media_type: MediaType | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> TitleQuery:
        """Build a query from a collaborator payload.

        Accepts ``{"title", "year"?, "type"? | "mediaType"?}``.

        Raises:
            RatingVaultError: MISSING_REQUIRED_FIELD when the payload is malformed
        """
        if isinstance(payload, TitleQuery):
            return payload

        context = ErrorContext(operation="parse_title_query")
        if not isinstance(payload, Mapping):
            raise RatingVaultError(
                ErrorCode.MISSING_REQUIRED_FIELD,
                "Title query must be a mapping",
                context,
            )

        title = payload.get("title")
        if not isinstance(title, str):
            raise RatingVaultError(
                ErrorCode.MISSING_REQUIRED_FIELD,
                "Title is required",
                context,
            )

        media_type = payload.get("type", payload.get("mediaType", payload.get("media_type")))
        try:
            return cls(
                title=title,
                year=_coerce_year(payload.get("year")),
                media_type=_coerce_media_type(media_type),
            )
        except ValueError as e:
            raise RatingVaultError(
                ErrorCode.MISSING_REQUIRED_FIELD,
                f"Malformed title query: {e}",
                context,
                original_error=e,
            ) from e


@dataclass(frozen=True)
class LookupResult:
    """Outcome of one lookup, in the shape collaborators expect."""

    success: bool
    ratings: RatingSet | None = None
    reason: FailureReason | None = None
    detail: str | None = None
    from_cache: bool = False

    @classmethod
    def ok(cls, ratings: RatingSet, *, from_cache: bool = False) -> LookupResult:
        return cls(success=True, ratings=ratings, from_cache=from_cache)

    @classmethod
    def failed(cls, reason: FailureReason, detail: str | None = None) -> LookupResult:
        return cls(success=False, reason=reason, detail=detail)

    def to_dict(self) -> dict[str, Any]:
        if self.success and self.ratings is not None:
            return {
                "success": True,
                "ratings": self.ratings.to_dict(),
                "fromCache": self.from_cache,
            }
        return {
            "success": False,
            "reason": self.reason.value if self.reason else None,
            "error": self.detail,
        }


__all__ = [
    "ImdbRating",
    "LookupResult",
    "MetacriticRating",
    "RatingSet",
    "RottenTomatoesRating",
    "TitleQuery",
]

"""OMDb search response models.

Dataclasses for the list-search endpoint, validated at the API boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ratingvault.shared.constants import OMDbFields


@dataclass(frozen=True)
class SearchResult:
    """Single entry from an OMDb search."""

    imdb_id: str
    title: str
    year: str | None = None
    media_type: str | None = None
    poster: str | None = None

    @classmethod
    def from_payload(cls, item: Mapping[str, Any]) -> SearchResult:
        def optional(name: str) -> str | None:
            value = item.get(name)
            if value in (None, "", OMDbFields.NOT_APPLICABLE):
                return None
            return str(value)

        return cls(
            imdb_id=str(item.get(OMDbFields.IMDB_ID, "")),
            title=str(item.get(OMDbFields.TITLE, "")),
            year=optional(OMDbFields.YEAR),
            media_type=optional(OMDbFields.TYPE),
            poster=optional(OMDbFields.POSTER),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "imdbId": self.imdb_id,
            "title": self.title,
            "year": self.year,
            "type": self.media_type,
            "poster": self.poster,
        }


@dataclass(frozen=True)
class SearchPage:
    """One page of search results.

    ``error`` carries the upstream message when the search matched nothing.
    """

    results: list[SearchResult] = field(default_factory=list)
    total_results: int = 0
    page: int = 1
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.results

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "results": [result.to_dict() for result in self.results],
            "totalResults": self.total_results,
            "page": self.page,
        }
        if self.error:
            data["error"] = self.error
        return data

"""Human-readable rating summaries."""

from __future__ import annotations

from ratingvault.core.models import RatingSet

NO_RATINGS = "No ratings available"
SEPARATOR = " | "


def format_ratings(ratings: RatingSet | None) -> str:
    """Render a one-line summary such as ``IMDb: 9.3/10 | MC: 82/100 | RT: 89%``."""
    if ratings is None:
        return NO_RATINGS

    parts: list[str] = []
    if ratings.imdb is not None:
        parts.append(f"IMDb: {ratings.imdb.score:.1f}/10")
    if ratings.metacritic is not None:
        parts.append(f"MC: {ratings.metacritic.score}/100")
    if ratings.rotten_tomatoes is not None:
        parts.append(f"RT: {ratings.rotten_tomatoes.score}%")

    return SEPARATOR.join(parts) if parts else NO_RATINGS

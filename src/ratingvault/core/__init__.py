"""Core value types and pure helpers."""

from __future__ import annotations

from .cache_key import derive_cache_key
from .formatting import format_ratings
from .models import (
    ImdbRating,
    LookupResult,
    MetacriticRating,
    RatingSet,
    RottenTomatoesRating,
    TitleQuery,
)

__all__ = [
    "ImdbRating",
    "LookupResult",
    "MetacriticRating",
    "RatingSet",
    "RottenTomatoesRating",
    "TitleQuery",
    "derive_cache_key",
    "format_ratings",
]

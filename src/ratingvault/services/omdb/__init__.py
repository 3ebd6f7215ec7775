"""OMDb upstream client package."""

from ratingvault.services.omdb.client import OMDbClient, classify_upstream_error
from ratingvault.services.omdb.models import SearchPage, SearchResult
from ratingvault.services.omdb.normalizer import normalize_ratings
from ratingvault.services.omdb.retry import (
    FetchAttempt,
    UpstreamStatusError,
    backoff_delay,
    run_with_retry,
)

__all__ = [
    "FetchAttempt",
    "OMDbClient",
    "SearchPage",
    "SearchResult",
    "UpstreamStatusError",
    "backoff_delay",
    "classify_upstream_error",
    "normalize_ratings",
    "run_with_retry",
]

"""
OMDb API Constants

This module contains constants for talking to the OMDb API: endpoint,
query parameter names, response field names and retry behaviour.
"""

from enum import Enum

from .cache import BASE_SECOND


class MediaType(str, Enum):
    """Media types accepted by the upstream ``type`` filter."""

    MOVIE = "movie"
    SERIES = "series"
    EPISODE = "episode"


class OMDbConfig:
    """OMDb endpoint and request defaults."""

    BASE_URL = "https://www.omdbapi.com/"
    DEFAULT_PLOT = "short"
    DEFAULT_TIMEOUT = 10 * BASE_SECOND
    USER_AGENT = "RatingVault/0.3.0"

    # Query parameter names
    PARAM_API_KEY = "apikey"
    PARAM_TITLE = "t"
    PARAM_IMDB_ID = "i"
    PARAM_SEARCH = "s"
    PARAM_YEAR = "y"
    PARAM_TYPE = "type"
    PARAM_PLOT = "plot"
    PARAM_PAGE = "page"

    IMDB_ID_PREFIX = "tt"


class OMDbErrorHandling:
    """Retry policy for transient upstream failures."""

    RETRY_ATTEMPTS = 3  # total attempts, including the first
    RETRY_BASE_DELAY = 1.0 * BASE_SECOND


class OMDbFields:
    """Response field names and sentinel values."""

    RESPONSE = "Response"
    ERROR = "Error"
    TITLE = "Title"
    YEAR = "Year"
    IMDB_ID = "imdbID"
    IMDB_RATING = "imdbRating"
    IMDB_VOTES = "imdbVotes"
    METASCORE = "Metascore"
    RATINGS = "Ratings"
    RATING_SOURCE = "Source"
    RATING_VALUE = "Value"
    SEARCH = "Search"
    TOTAL_RESULTS = "totalResults"
    TYPE = "Type"
    POSTER = "Poster"

    RESPONSE_TRUE = "True"
    RESPONSE_FALSE = "False"
    NOT_APPLICABLE = "N/A"

    SOURCE_ROTTEN_TOMATOES = "Rotten Tomatoes"
    SOURCE_METACRITIC = "Metacritic"
    SOURCE_IMDB = "Internet Movie Database"


class OMDbMessages:
    """Substrings used to classify upstream error messages (lower-cased)."""

    NOT_FOUND_MARKERS = ("not found",)
    INVALID_KEY_MARKERS = ("invalid api key", "no api key")

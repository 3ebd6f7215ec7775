"""
Message Dispatch Constants

Request types understood by the message router, matching what the
page-overlay and settings collaborators send.
"""


class MessageTypes:
    """Request type identifiers."""

    FETCH_RATINGS = "FETCH_RATINGS"
    CLEAR_CACHE = "CLEAR_CACHE"
    GET_CACHE_STATS = "GET_CACHE_STATS"
    SET_CACHE_DURATION = "SET_CACHE_DURATION"
    GET_CACHE_DURATION = "GET_CACHE_DURATION"
    CLEANUP_EXPIRED = "CLEANUP_EXPIRED"
    GET_CACHE_INFO = "GET_CACHE_INFO"

    UNKNOWN_TYPE_ERROR = "Unknown message type"

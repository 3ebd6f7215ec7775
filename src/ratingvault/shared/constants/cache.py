"""
Cache Configuration Constants

This module provides the cache constants shared by the ephemeral and
durable tiers of the rating cache.
"""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE

MILLIS_PER_HOUR = BASE_HOUR * 1000


class Cache:
    """Rating cache constants."""

    # TTL
    DEFAULT_DURATION_HOURS = 24
    MILLIS_PER_HOUR = MILLIS_PER_HOUR

    # Durable tier bounds (batch eviction, not incremental)
    MAX_ENTRIES = 500
    EVICT_COUNT = 250

    # Storage
    DEFAULT_DB_FILENAME = "ratings_cache.db"
    DEFAULT_DIR = ".ratingvault"

    # Cache key derivation
    KEY_DELIMITER = ":"

    BYTES_PER_KB = 1024


class CacheStorageKeys:
    """Names used inside the durable tier."""

    NAMESPACE = "netflix_ratings_cache"
    DURATION_KEY = "cacheDurationHours"

    # Persisted entry layout
    DATA = "data"
    TIMESTAMP = "timestamp"

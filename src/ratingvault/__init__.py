"""RatingVault - cached rating lookups for media titles.

Fetches IMDb, Metacritic and Rotten Tomatoes ratings from OMDb and keeps
them in a dual-tier (memory + SQLite) TTL cache.
"""

__version__ = "0.3.0"

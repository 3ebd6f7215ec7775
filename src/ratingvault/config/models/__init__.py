"""Configuration domain models."""

from __future__ import annotations

from .app_settings import LoggingSettings
from .cache_settings import CacheSettings
from .omdb_settings import OMDbSettings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "OMDbSettings",
]

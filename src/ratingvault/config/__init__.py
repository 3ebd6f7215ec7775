"""RatingVault Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config, reset_config
- Domain models: OMDb, Cache and Logging settings
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config, reset_config
from .models import CacheSettings, LoggingSettings, OMDbSettings
from .models.settings import Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "OMDbSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
    "reset_config",
]

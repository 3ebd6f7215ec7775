"""
RatingVault Constants Module

This module provides centralized constants for the RatingVault application.
All magic values and configuration constants are defined here to ensure
consistency across the cache, the upstream client and the CLI.
"""

from .cache import BASE_HOUR, BASE_MINUTE, BASE_SECOND, Cache, CacheStorageKeys
from .cli import CLICommands, CLIDefaults, CLIHelp, CLIMessages, CLIOptions
from .omdb import MediaType, OMDbConfig, OMDbErrorHandling, OMDbFields, OMDbMessages
from .messages import MessageTypes

__all__ = [
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "CLIOptions",
    "Cache",
    "CacheStorageKeys",
    "MediaType",
    "MessageTypes",
    "OMDbConfig",
    "OMDbErrorHandling",
    "OMDbFields",
    "OMDbMessages",
]

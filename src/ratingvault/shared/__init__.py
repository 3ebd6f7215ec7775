"""RatingVault Shared Module.

This package contains constants, error handling and logging helpers used across RatingVault.
"""

__all__ = ["constants", "errors", "logging"]

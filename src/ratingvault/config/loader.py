"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ratingvault.config.models.settings import Settings
from ratingvault.shared.constants import Cache
from ratingvault.shared.errors import ErrorCode, ErrorContext, RatingVaultError

logger = logging.getLogger(__name__)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking to keep the fast path lock-free.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()
        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration sources."""
        with self._lock:
            self._instance = load_settings(config_path)
        return self._instance

    def reset(self) -> None:
        """Drop the cached instance (used by tests)."""
        with self._lock:
            self._instance = None


def _default_config_paths() -> list[Path]:
    return [
        Path("config/ratingvault.toml"),
        Path("ratingvault.toml"),
        Path.home() / Cache.DEFAULT_DIR / "config.toml",
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML file. If None, default locations
                    are tried before falling back to environment variables.

    Returns:
        Settings instance loaded from the first available source

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        RatingVaultError: If the configuration fails validation
    """
    load_dotenv(Path(".env"), override=False)

    try:
        if config_path:
            return Settings.from_toml_file(config_path)

        for candidate in _default_config_paths():
            if candidate.exists():
                logger.debug("Loading configuration from %s", candidate)
                return Settings.from_toml_file(candidate)

        return Settings()
    except ValidationError as e:
        raise RatingVaultError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid configuration: {e.error_count()} validation error(s)",
            context=ErrorContext(
                operation="load_settings",
                additional_data={"config_path": str(config_path) if config_path else ""},
            ),
            original_error=e,
        ) from e


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance."""
    return _loader.reload_config(config_path)


def reset_config() -> None:
    """Forget the global settings instance."""
    _loader.reset()


__all__ = [
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
    "reset_config",
]

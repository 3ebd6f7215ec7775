"""RatingVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import toml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ratingvault.config.models.app_settings import LoggingSettings
from ratingvault.config.models.cache_settings import CacheSettings
from ratingvault.config.models.omdb_settings import OMDbSettings


# Conventional variable name, honoured in addition to RATINGVAULT_OMDB__API_KEY
OMDB_API_KEY_ENV = "OMDB_API_KEY"


class Settings(BaseSettings):
    """Settings facade providing unified configuration access."""

    model_config = SettingsConfigDict(
        env_prefix="RATINGVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    omdb: OMDbSettings = Field(default_factory=OMDbSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def apply_plain_api_key(self) -> Settings:
        if not self.omdb.api_key:
            plain_key = os.environ.get(OMDB_API_KEY_ENV, "").strip()
            if plain_key:
                self.omdb.api_key = plain_key
        return self

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config: dict[str, Any] = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file.

        The API key is written (config files are not logs); repr masks it.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)
        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)

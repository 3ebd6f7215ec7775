"""Tests for settings models and the settings loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ratingvault.config import CacheSettings, OMDbSettings, Settings, load_settings
from ratingvault.config.loader import SettingsLoader
from ratingvault.shared.constants import Cache, OMDbConfig
from ratingvault.shared.errors import ErrorCode, RatingVaultError

ENV_VARS = (
    "OMDB_API_KEY",
    "RATINGVAULT_OMDB__API_KEY",
    "RATINGVAULT_OMDB__TIMEOUT",
    "RATINGVAULT_CACHE__MAX_ENTRIES",
    "RATINGVAULT_CACHE__DEFAULT_DURATION_HOURS",
    "RATINGVAULT_LOGGING__LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Isolate settings from the developer's environment and home directory."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestDefaults:
    def test_default_values(self, clean_env: Path) -> None:
        settings = Settings()

        assert settings.omdb.api_key == ""
        assert settings.omdb.base_url == OMDbConfig.BASE_URL
        assert settings.omdb.retry_attempts == 3
        assert settings.cache.default_duration_hours == Cache.DEFAULT_DURATION_HOURS
        assert settings.cache.max_entries == 500
        assert settings.cache.evict_count == 250
        assert settings.cache.db_path.name == Cache.DEFAULT_DB_FILENAME
        assert settings.logging.level == "INFO"

    def test_load_settings_without_files_uses_environment(self, clean_env: Path) -> None:
        settings = load_settings()

        assert settings.cache.max_entries == Cache.MAX_ENTRIES


class TestEnvironmentOverrides:
    def test_nested_variables(
        self,
        clean_env: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        # Given
        monkeypatch.setenv("RATINGVAULT_OMDB__API_KEY", "env-key")
        monkeypatch.setenv("RATINGVAULT_OMDB__TIMEOUT", "3.5")
        monkeypatch.setenv("RATINGVAULT_CACHE__MAX_ENTRIES", "1000")
        monkeypatch.setenv("RATINGVAULT_LOGGING__LEVEL", "DEBUG")

        # When
        settings = Settings()

        # Then
        assert settings.omdb.api_key == "env-key"
        assert settings.omdb.timeout == 3.5
        assert settings.cache.max_entries == 1000
        assert settings.logging.level == "DEBUG"

    def test_plain_omdb_api_key(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OMDB_API_KEY", "plain-key")

        assert Settings().omdb.api_key == "plain-key"

    def test_prefixed_key_wins_over_plain_key(
        self,
        clean_env: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("OMDB_API_KEY", "plain-key")
        monkeypatch.setenv("RATINGVAULT_OMDB__API_KEY", "prefixed-key")

        assert Settings().omdb.api_key == "prefixed-key"


class TestTomlFiles:
    def test_load_explicit_file(self, clean_env: Path) -> None:
        config_file = clean_env / "custom.toml"
        config_file.write_text(
            '[omdb]\napi_key = "file-key"\n\n[cache]\ndefault_duration_hours = 6\n',
            encoding="utf-8",
        )

        settings = load_settings(config_file)

        assert settings.omdb.api_key == "file-key"
        assert settings.cache.default_duration_hours == 6

    def test_default_location_is_discovered(self, clean_env: Path) -> None:
        (clean_env / "ratingvault.toml").write_text(
            "[cache]\nmax_entries = 800\n",
            encoding="utf-8",
        )

        assert load_settings().cache.max_entries == 800

    def test_missing_explicit_file(self, clean_env: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(clean_env / "absent.toml")

    def test_invalid_values_are_wrapped(self, clean_env: Path) -> None:
        config_file = clean_env / "bad.toml"
        config_file.write_text(
            "[cache]\nmax_entries = 100\nevict_count = 250\n",
            encoding="utf-8",
        )

        with pytest.raises(RatingVaultError) as exc_info:
            load_settings(config_file)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID
        assert isinstance(exc_info.value.original_error, ValidationError)

    def test_save_and_reload(self, clean_env: Path) -> None:
        settings = Settings(omdb=OMDbSettings(api_key="saved-key"))
        target = clean_env / "nested" / "saved.toml"

        settings.to_toml_file(target)
        reloaded = Settings.from_toml_file(target)

        assert reloaded.omdb.api_key == "saved-key"
        assert reloaded.cache.db_path == settings.cache.db_path


class TestValidation:
    def test_evict_count_cannot_exceed_max_entries(self) -> None:
        with pytest.raises(ValidationError):
            CacheSettings(max_entries=100, evict_count=250)

    @pytest.mark.parametrize("hours", [0, -5])
    def test_default_duration_must_be_positive(self, hours: int) -> None:
        with pytest.raises(ValidationError):
            CacheSettings(default_duration_hours=hours)

    def test_repr_masks_api_key(self) -> None:
        settings = OMDbSettings(api_key="super-secret")

        assert "super-secret" not in repr(settings)
        assert "****" in repr(settings)


class TestSettingsLoader:
    def test_instance_is_cached_until_reset(self, clean_env: Path) -> None:
        loader = SettingsLoader()

        first = loader.get_config()
        assert loader.get_config() is first

        loader.reset()
        assert loader.get_config() is not first

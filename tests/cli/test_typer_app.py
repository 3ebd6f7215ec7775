"""Tests for the Typer command-line interface."""

from __future__ import annotations

import json
from collections.abc import Generator

import pytest
from fakes import StubFetcher
from typer.testing import CliRunner

from ratingvault.cli.common.context import (
    CliContext,
    LogLevel,
    clear_cli_context,
    get_cli_context,
)
from ratingvault.cli.json_formatter import format_json_output
from ratingvault.cli.typer_app import app, main_callback
from ratingvault.core.models import RatingSet
from ratingvault.services.cache.memory_store import InMemoryDurableStore
from ratingvault.services.cache.rating_cache import RatingCache
from ratingvault.services.rating_service import RatingService
from ratingvault.shared.errors import ErrorCode, NotFoundError, RatingVaultError

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_cli_context() -> Generator[None, None, None]:
    yield
    clear_cli_context()


@pytest.fixture
def fetcher(shawshank_ratings: RatingSet) -> StubFetcher:
    return StubFetcher(shawshank_ratings)


@pytest.fixture
def service(fetcher: StubFetcher) -> RatingService:
    return RatingService(RatingCache(InMemoryDurableStore()), fetcher)


@pytest.fixture
def patched_service(mocker, service: RatingService) -> RatingService:
    """Route every command to one in-memory service."""
    mocker.patch("ratingvault.cli.lookup_handler.build_service", return_value=service)
    mocker.patch("ratingvault.cli.cache_handler.build_service", return_value=service)
    return service


class TestGlobalOptions:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "RatingVault CLI v0.3.0" in result.stdout

    def test_no_arguments_shows_help(self) -> None:
        result = runner.invoke(app, [])

        assert "lookup" in result.output

    def test_main_callback_sets_context(self) -> None:
        main_callback(verbose=0, log_level=LogLevel.ERROR, json_output=True, version=False)

        context = get_cli_context()
        assert context.json_output is True
        assert context.get_effective_log_level() == "ERROR"

    def test_verbose_forces_debug(self) -> None:
        context = CliContext(verbose=2, log_level=LogLevel.ERROR)

        assert context.get_effective_log_level() == "DEBUG"

    def test_default_context_without_callback(self) -> None:
        assert get_cli_context() == CliContext()


class TestLookupCommand:
    def test_text_output(self, patched_service: RatingService, fetcher: StubFetcher) -> None:
        result = runner.invoke(app, ["lookup", "The Shawshank Redemption", "--year", "1994"])

        assert result.exit_code == 0
        assert "The Shawshank Redemption (1994)" in result.stdout
        assert "2,900,000" in result.stdout
        assert "IMDb: 9.3/10 | MC: 82/100 | RT: 89%" in result.stdout
        assert len(fetcher.queries) == 1

    def test_second_lookup_is_cached(self, patched_service: RatingService, fetcher: StubFetcher) -> None:
        runner.invoke(app, ["lookup", "Heat"])
        result = runner.invoke(app, ["lookup", "Heat"])

        assert result.exit_code == 0
        assert "(cached)" in result.stdout
        assert len(fetcher.queries) == 1

    def test_json_output(self, patched_service: RatingService, shawshank_ratings: RatingSet) -> None:
        result = runner.invoke(
            app,
            ["--json", "--log-level", "ERROR", "lookup", "Dark", "--type", "SERIES"],
        )

        assert result.exit_code == 0
        envelope = json.loads(result.stdout)
        assert envelope["success"] is True
        assert envelope["command"] == "lookup"
        assert envelope["data"] == {
            "success": True,
            "ratings": shawshank_ratings.to_dict(),
            "fromCache": False,
        }

    def test_failure_exit_code(self, mocker) -> None:
        error = NotFoundError(ErrorCode.OMDB_API_MEDIA_NOT_FOUND, "Movie not found!")
        service = RatingService(RatingCache(InMemoryDurableStore()), StubFetcher(error))
        mocker.patch("ratingvault.cli.lookup_handler.build_service", return_value=service)

        result = runner.invoke(app, ["--log-level", "ERROR", "lookup", "Nope"])

        assert result.exit_code == 1
        assert "NotFound" in result.stdout
        assert "Movie not found!" in result.stdout

    def test_json_failure(self, mocker) -> None:
        error = NotFoundError(ErrorCode.OMDB_API_MEDIA_NOT_FOUND, "Movie not found!")
        service = RatingService(RatingCache(InMemoryDurableStore()), StubFetcher(error))
        mocker.patch("ratingvault.cli.lookup_handler.build_service", return_value=service)

        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "lookup", "Nope"])

        assert result.exit_code == 1
        envelope = json.loads(result.stdout)
        assert envelope["success"] is False
        assert envelope["errors"] == ["Movie not found!"]
        assert envelope["data"]["reason"] == "NotFound"

    def test_configuration_error(self, mocker) -> None:
        mocker.patch(
            "ratingvault.cli.lookup_handler.build_service",
            side_effect=RatingVaultError(ErrorCode.CONFIG_INVALID, "Invalid configuration"),
        )

        result = runner.invoke(app, ["--json", "--log-level", "CRITICAL", "lookup", "Heat"])

        assert result.exit_code == 1
        envelope = json.loads(result.stdout)
        assert envelope["errors"] == ["Invalid configuration"]

    def test_invalid_media_type(self) -> None:
        result = runner.invoke(app, ["lookup", "Heat", "--type", "podcast"])

        assert result.exit_code == 2


class TestCacheCommands:
    def test_stats_after_lookup(self, patched_service: RatingService) -> None:
        runner.invoke(app, ["lookup", "Heat"])

        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "cache", "stats"])

        assert result.exit_code == 0
        envelope = json.loads(result.stdout)
        assert envelope["command"] == "cache stats"
        assert envelope["data"]["totalItems"] == 1
        assert envelope["data"]["durationHours"] == 24

    def test_stats_text(self, patched_service: RatingService) -> None:
        result = runner.invoke(app, ["cache", "stats"])

        assert result.exit_code == 0
        assert "Total items" in result.stdout

    def test_clear(self, patched_service: RatingService) -> None:
        runner.invoke(app, ["lookup", "Heat"])
        runner.invoke(app, ["lookup", "Alien"])

        result = runner.invoke(app, ["cache", "clear"])

        assert result.exit_code == 0
        assert "Entries removed: 2" in result.stdout

    def test_cleanup_json(self, patched_service: RatingService) -> None:
        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "cache", "cleanup"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"] == {"removedCount": 0}

    def test_info(self, patched_service: RatingService) -> None:
        empty = runner.invoke(app, ["cache", "info"])
        runner.invoke(app, ["lookup", "Heat"])
        listed = runner.invoke(app, ["--json", "--log-level", "ERROR", "cache", "info"])

        assert "No cached entries." in empty.stdout
        entries = json.loads(listed.stdout)["data"]["entries"]
        assert [entry["key"] for entry in entries] == ["Heat"]

    def test_duration_show_and_set(self, patched_service: RatingService) -> None:
        set_result = runner.invoke(app, ["cache", "duration", "48"])
        show_result = runner.invoke(app, ["cache", "duration"])

        assert set_result.exit_code == 0
        assert "Cache duration set to 48h" in set_result.stdout
        assert "Cache duration: 48h" in show_result.stdout

    def test_invalid_duration(self, patched_service: RatingService) -> None:
        result = runner.invoke(app, ["--log-level", "ERROR", "cache", "duration", "0"])

        assert result.exit_code == 1
        assert "Invalid cache duration" in result.stdout

    def test_invalid_duration_json(self, patched_service: RatingService) -> None:
        result = runner.invoke(app, ["--json", "--log-level", "ERROR", "cache", "duration", "0"])

        assert result.exit_code == 1
        envelope = json.loads(result.stdout)
        assert envelope["success"] is False
        assert envelope["data"]["reason"] == "InvalidDuration"


class TestJsonFormatter:
    def test_errors_force_failure(self) -> None:
        envelope = json.loads(format_json_output(True, "lookup", errors=["boom"]))

        assert envelope["success"] is False
        assert envelope["warnings"] == []

    def test_unserializable_data(self) -> None:
        envelope = json.loads(format_json_output(True, "lookup", data={"value": object()}))

        assert envelope["success"] is False
        assert envelope["errors"][0].startswith("JSON serialization failed")

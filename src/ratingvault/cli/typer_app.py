"""
RatingVault Typer CLI Application

Command-line front end for looking up ratings and managing the rating
cache. Global options are parsed once in the main callback and shared
with commands through the CLI context.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ratingvault.cli.cache_handler import (
    cleanup_command,
    clear_command,
    duration_command,
    info_command,
    stats_command,
)
from ratingvault.cli.common.context import CliContext, LogLevel, set_cli_context
from ratingvault.cli.common.options import (
    config_option,
    json_output_option,
    log_level_option,
    verbose_option,
    version_callback,
    version_option,
)
from ratingvault.cli.lookup_handler import lookup_command
from ratingvault.shared.constants import (
    CLICommands,
    CLIDefaults,
    CLIHelp,
    CLIOptions,
    MediaType,
)
from ratingvault.shared.logging import setup_structured_logger

# Version information
__version__ = CLIDefaults.VERSION


def main_callback(
    verbose: int,
    log_level: LogLevel,
    json_output: bool,
    version: bool,
    config_path: Path | None = None,
) -> None:
    """
    Process common options before any command runs.

    Args:
        verbose: Verbosity level (count-based)
        log_level: Logging level (enum-based)
        json_output: Whether to output in JSON format
        version: Whether to show version information
        config_path: Optional TOML configuration file
    """
    if version:
        version_callback(value=True)

    context = CliContext(
        verbose=verbose,
        log_level=log_level,
        json_output=json_output,
        config_path=config_path,
    )
    set_cli_context(context)
    setup_structured_logger(level=context.get_effective_log_level())


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)

cache_app = typer.Typer(
    help=CLIHelp.CACHE_HELP,
    no_args_is_help=True,
)
app.add_typer(cache_app, name=CLICommands.CACHE)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel, log_level_option] = LogLevel.WARNING,
    json_output: Annotated[bool, json_output_option] = False,
    version: Annotated[bool, version_option] = False,
    config_path: Annotated[Path | None, config_option] = None,
) -> None:
    """Fetch, cache and inspect title ratings."""
    main_callback(verbose, log_level, json_output, version, config_path)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command(CLICommands.LOOKUP, help=CLIHelp.LOOKUP_HELP)
def lookup_command_typer(
    title: str = typer.Argument(..., help=CLIHelp.LOOKUP_TITLE_HELP),
    year: int | None = typer.Option(
        None,
        CLIOptions.YEAR,
        CLIOptions.YEAR_SHORT,
        help=CLIHelp.LOOKUP_YEAR_HELP,
    ),
    media_type: MediaType | None = typer.Option(
        None,
        CLIOptions.TYPE,
        CLIOptions.TYPE_SHORT,
        case_sensitive=False,
        help=CLIHelp.LOOKUP_TYPE_HELP,
    ),
) -> None:
    """
    Look up ratings for a title.

    Examples:
        ratingvault lookup "The Shawshank Redemption"

        ratingvault lookup Inception --year 2010 --type movie

        ratingvault --json lookup "Breaking Bad" --type series
    """
    _exit(lookup_command(title, year, media_type))


@cache_app.command(CLICommands.STATS, help=CLIHelp.STATS_HELP)
def cache_stats_typer() -> None:
    _exit(stats_command())


@cache_app.command(CLICommands.CLEAR, help=CLIHelp.CLEAR_HELP)
def cache_clear_typer() -> None:
    _exit(clear_command())


@cache_app.command(CLICommands.CLEANUP, help=CLIHelp.CLEANUP_HELP)
def cache_cleanup_typer() -> None:
    _exit(cleanup_command())


@cache_app.command(CLICommands.INFO, help=CLIHelp.INFO_HELP)
def cache_info_typer() -> None:
    _exit(info_command())


@cache_app.command(CLICommands.DURATION, help=CLIHelp.DURATION_HELP)
def cache_duration_typer(
    hours: int | None = typer.Argument(None, help=CLIHelp.DURATION_HOURS_HELP),
) -> None:
    _exit(duration_command(hours))


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()

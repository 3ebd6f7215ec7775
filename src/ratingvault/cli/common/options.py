"""
Reusable Typer Options Module

Shared option definitions for the main callback, used as
``Annotated[int, verbose_option]`` metadata.
"""

from __future__ import annotations

import typer

from ratingvault.shared.constants import CLIDefaults, CLIHelp, CLIOptions


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=CLIDefaults.VERSION))
        raise typer.Exit


# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

# Log level option - enum-based with case-insensitive choices
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: WARNING.",
)

# JSON output option - flag-based
json_output_option = typer.Option(
    CLIOptions.JSON,
    help="Enable machine-readable JSON output instead of human-readable format.",
)

# Version option - for main app only
version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    callback=version_callback,
    is_eager=True,
)

config_option = typer.Option(
    CLIOptions.CONFIG,
    "-c",
    help=CLIHelp.CONFIG_HELP,
    exists=True,
    dir_okay=False,
    readable=True,
)

"""
CLI Configuration Constants

This module contains all constants related to the command-line interface:
command names, option flags, help text and message templates.
"""


class CLIDefaults:
    """Default CLI values."""

    VERSION = "0.3.0"
    APP_NAME = "ratingvault"


class CLICommands:
    """Command names."""

    LOOKUP = "lookup"
    CACHE = "cache"
    STATS = "stats"
    CLEAR = "clear"
    CLEANUP = "cleanup"
    INFO = "info"
    DURATION = "duration"


class CLIOptions:
    """Option flags."""

    YEAR = "--year"
    YEAR_SHORT = "-y"
    TYPE = "--type"
    TYPE_SHORT = "-t"
    JSON = "--json"
    CONFIG = "--config"


class CLIHelp:
    """Help text."""

    APP_NAME = "ratingvault"
    APP_DESCRIPTION = "Fetch, cache and inspect IMDb, Metacritic and Rotten Tomatoes ratings."
    APP_STYLE = "rich"
    VERSION_TEXT = "RatingVault CLI v{version}"

    LOOKUP_HELP = "Look up ratings for a title (served from cache when fresh)."
    LOOKUP_TITLE_HELP = "Title to look up"
    LOOKUP_YEAR_HELP = "Release year"
    LOOKUP_TYPE_HELP = "Media type (movie, series, episode)"

    CACHE_HELP = "Inspect and manage the rating cache."
    STATS_HELP = "Show cache statistics."
    CLEAR_HELP = "Remove every cached entry."
    CLEANUP_HELP = "Remove expired entries."
    INFO_HELP = "List cached entries with their age."
    DURATION_HELP = "Show or set the cache duration in hours."
    DURATION_HOURS_HELP = "New duration in hours (positive integer)"
    CONFIG_HELP = "Path to a TOML configuration file"


class CLIMessages:
    """CLI message templates."""

    class Error:
        """Error message templates."""

        LOOKUP_FAILED = "[red]Ratings unavailable ({reason}): {detail}[/red]"
        INVALID_DURATION = "[red]Invalid cache duration: {detail}[/red]"
        UNEXPECTED = "[red]Unexpected error: {error}[/red]"

    class Success:
        """Success message templates."""

        CACHE_CLEARED = "[green]Cache cleared. Entries removed: {count}[/green]"
        CLEANUP_DONE = "[green]Cleanup complete. Entries removed: {count}[/green]"
        DURATION_SET = "[green]Cache duration set to {hours}h[/green]"

    class Info:
        """Informational templates."""

        DURATION = "Cache duration: {hours}h"
        FROM_CACHE = "[dim](cached)[/dim]"
        NO_ENTRIES = "No cached entries."

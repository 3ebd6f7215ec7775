"""Lookup command handler.

Resolves ratings for one title through the rating service and renders
either a Rich table or the JSON envelope.
"""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ratingvault.cli.common.context import get_cli_context
from ratingvault.cli.common.error_handler import EXIT_FAILURE, handle_cli_error
from ratingvault.cli.common.service import build_service
from ratingvault.cli.json_formatter import echo_json
from ratingvault.core.formatting import format_ratings
from ratingvault.core.models import LookupResult, RatingSet
from ratingvault.shared.constants import CLICommands, CLIMessages, MediaType


async def _lookup(title: str, year: int | None, media_type: MediaType | None) -> LookupResult:
    async with build_service() as service:
        return await service.lookup({"title": title, "year": year, "type": media_type})


def _ratings_table(ratings: RatingSet) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Source")
    table.add_column("Score", justify="right")
    table.add_column("Votes", justify="right")

    if ratings.imdb is not None:
        table.add_row("IMDb", f"{ratings.imdb.score:.1f}/10", f"{ratings.imdb.vote_count:,}")
    if ratings.metacritic is not None:
        table.add_row("Metacritic", f"{ratings.metacritic.score}/100", "")
    if ratings.rotten_tomatoes is not None:
        table.add_row("Rotten Tomatoes", f"{ratings.rotten_tomatoes.score}%", "")
    return table


def lookup_command(
    title: str,
    year: int | None = None,
    media_type: MediaType | None = None,
) -> int:
    """Run the lookup command and return its exit code."""
    context = get_cli_context()
    try:
        result = asyncio.run(_lookup(title, year, media_type))
    except Exception as e:  # noqa: BLE001
        return handle_cli_error(e, CLICommands.LOOKUP, json_output=context.json_output)

    if context.is_json_output_enabled():
        echo_json(
            result.success,
            CLICommands.LOOKUP,
            data=result.to_dict(),
            errors=[] if result.success else [result.detail or "Ratings unavailable"],
        )
        return 0 if result.success else EXIT_FAILURE

    console = Console()
    if not result.success or result.ratings is None:
        reason = result.reason.value if result.reason else "Unknown"
        console.print(
            CLIMessages.Error.LOOKUP_FAILED.format(
                reason=reason,
                detail=escape(result.detail or ""),
            ),
        )
        return EXIT_FAILURE

    heading = f"[bold]{escape(title.strip())}[/bold]"
    if year is not None:
        heading += f" ({year})"
    if result.from_cache:
        heading += f" {CLIMessages.Info.FROM_CACHE}"
    console.print(heading)
    if not result.ratings.is_empty():
        console.print(_ratings_table(result.ratings))
    console.print(format_ratings(result.ratings), highlight=False)
    return 0

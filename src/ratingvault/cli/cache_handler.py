"""Cache management command handlers."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any, Callable, TypeVar

from rich.console import Console
from rich.table import Table

from ratingvault.cli.common.context import get_cli_context
from ratingvault.cli.common.error_handler import EXIT_FAILURE, handle_cli_error
from ratingvault.cli.common.service import build_service
from ratingvault.cli.json_formatter import echo_json
from ratingvault.services.cache.models import CacheEntryInfo, CacheStats
from ratingvault.services.rating_service import OperationResult, RatingService
from ratingvault.shared.constants import CLICommands, CLIMessages

T = TypeVar("T")


def _run(action: Callable[[RatingService], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with build_service() as service:
            return await action(service)

    return asyncio.run(runner())


def _command_name(name: str) -> str:
    return f"{CLICommands.CACHE} {name}"


def _execute(
    name: str,
    action: Callable[[RatingService], Awaitable[T]],
    render: Callable[[T, Console], int],
    to_data: Callable[[T], Any],
) -> int:
    context = get_cli_context()
    command = _command_name(name)
    try:
        value = _run(action)
    except Exception as e:  # noqa: BLE001
        return handle_cli_error(e, command, json_output=context.json_output)

    if context.is_json_output_enabled():
        data = to_data(value)
        success = not isinstance(value, OperationResult) or value.success
        errors = [] if success else [value.detail or "Operation failed"]
        echo_json(success, command, data=data, errors=errors)
        return 0 if success else EXIT_FAILURE

    return render(value, Console())


def _render_stats(stats: CacheStats, console: Console) -> int:
    table = Table(title="Rating cache", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Total items", str(stats.total_items))
    table.add_row("Memory items", str(stats.memory_items))
    table.add_row("Persistent items", str(stats.persistent_items))
    table.add_row("Size estimate", f"{stats.size_estimate_kb} KB")
    table.add_row("Duration", f"{stats.duration_hours}h")
    console.print(table)
    return 0


def stats_command() -> int:
    return _execute(
        CLICommands.STATS,
        lambda service: service.get_cache_stats(),
        _render_stats,
        lambda stats: stats.to_dict(),
    )


def clear_command() -> int:
    def render(count: int, console: Console) -> int:
        console.print(CLIMessages.Success.CACHE_CLEARED.format(count=count))
        return 0

    return _execute(
        CLICommands.CLEAR,
        lambda service: service.clear_cache(),
        render,
        lambda count: {"removedCount": count},
    )


def cleanup_command() -> int:
    def render(count: int, console: Console) -> int:
        console.print(CLIMessages.Success.CLEANUP_DONE.format(count=count))
        return 0

    return _execute(
        CLICommands.CLEANUP,
        lambda service: service.cleanup_expired(),
        render,
        lambda count: {"removedCount": count},
    )


def _render_info(entries: list[CacheEntryInfo], console: Console) -> int:
    if not entries:
        console.print(CLIMessages.Info.NO_ENTRIES)
        return 0

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key")
    table.add_column("Age (h)", justify="right")
    table.add_column("Expired")
    for entry in entries:
        table.add_row(entry.key, f"{entry.age_hours:.1f}", "yes" if entry.is_expired else "no")
    console.print(table)
    return 0


def info_command() -> int:
    return _execute(
        CLICommands.INFO,
        lambda service: service.get_detailed_info(),
        _render_info,
        lambda entries: {"entries": [entry.to_dict() for entry in entries]},
    )


def duration_command(hours: int | None = None) -> int:
    """Show the cache duration, or set it when hours is given."""
    if hours is None:

        def show(current: int, console: Console) -> int:
            console.print(CLIMessages.Info.DURATION.format(hours=current))
            return 0

        return _execute(
            CLICommands.DURATION,
            lambda service: service.get_cache_duration(),
            show,
            lambda current: {"durationHours": current},
        )

    def render(result: OperationResult, console: Console) -> int:
        if not result.success:
            console.print(CLIMessages.Error.INVALID_DURATION.format(detail=result.detail))
            return EXIT_FAILURE
        console.print(CLIMessages.Success.DURATION_SET.format(hours=hours))
        return 0

    return _execute(
        CLICommands.DURATION,
        lambda service: service.set_cache_duration(hours),
        render,
        lambda result: result.to_dict(),
    )

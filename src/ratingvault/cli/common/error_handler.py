"""
CLI Error Handling Utilities

Consistent error output and exit codes for CLI commands.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from ratingvault.cli.json_formatter import echo_json
from ratingvault.shared.constants import CLIMessages
from ratingvault.shared.errors import (
    CliError,
    ErrorCode,
    ErrorContext,
    RatingVaultError,
)
from ratingvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Log and report an error raised by a command.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    if isinstance(error, RatingVaultError):
        cli_error = error
    else:
        cli_error = CliError(
            ErrorCode.CLI_COMMAND_FAILED,
            str(error) or type(error).__name__,
            ErrorContext(
                operation=command,
                additional_data={"error_type": type(error).__name__},
            ),
            original_error=error,
        )
    log_operation_error(logger, cli_error, command)

    if json_output:
        echo_json(False, command, errors=[cli_error.message])
    else:
        Console(stderr=True).print(
            CLIMessages.Error.UNEXPECTED.format(error=escape(cli_error.message)),
        )
    return EXIT_FAILURE

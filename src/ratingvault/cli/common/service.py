"""Service construction for CLI commands."""

from __future__ import annotations

import logging

from ratingvault.cli.common.context import get_cli_context
from ratingvault.config import get_config, load_settings
from ratingvault.config.models.settings import Settings
from ratingvault.services.rating_service import RatingService, create_rating_service
from ratingvault.shared.logging import setup_structured_logger

logger = logging.getLogger(__name__)


def load_cli_settings() -> Settings:
    """Settings from ``--config`` when given, else the global configuration."""
    context = get_cli_context()
    if context.config_path is not None:
        return load_settings(context.config_path)
    return get_config()


def build_service() -> RatingService:
    """Create a RatingService for one command invocation.

    Re-applies logging so that a configured log file receives JSON lines.
    """
    settings = load_cli_settings()
    context = get_cli_context()

    if settings.logging.file:
        setup_structured_logger(
            level=context.get_effective_log_level(),
            log_file=settings.logging.file,
            use_rich_console=settings.logging.console_output,
        )

    return create_rating_service(settings)

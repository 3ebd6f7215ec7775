"""RatingVault command-line interface."""

from ratingvault.cli.typer_app import app, run

__all__ = ["app", "run"]

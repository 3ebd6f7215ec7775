"""Allow ``python -m ratingvault``."""

from ratingvault.cli.typer_app import run

if __name__ == "__main__":
    run()

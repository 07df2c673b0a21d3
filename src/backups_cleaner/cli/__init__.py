"""CLI commands for backups-cleaner."""

from .core import app


def main() -> None:
    """Console entry point for the backups-cleaner CLI."""
    app()


__all__ = ["app", "main"]

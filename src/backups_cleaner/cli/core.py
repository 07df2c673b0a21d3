"""Core CLI application and shared utilities."""

from __future__ import annotations

import typer
from click import get_current_context

from ..logger import configure_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    config: str = typer.Option(None, "--config", "-c", help="Path to settings.yaml"),
    log_level: str = typer.Option(None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    log_json: bool = typer.Option(False, "--log-json", help="Emit log records as JSON lines"),
) -> None:
    """Backups Cleaner - Remove expendable backups from your storage."""
    configure_logging(level=log_level, json_output=log_json)
    ctx.obj = {"config": config}


def get_config_path(ctx: typer.Context | None = None) -> str | None:
    """Get config path from context."""
    context = ctx or get_current_context(silent=True)
    return context.obj.get("config") if context and context.obj else None


def _register_commands() -> None:
    from .prune_cli import prune_backups

    app.command("prune")(prune_backups)


_register_commands()

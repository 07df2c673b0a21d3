"""
CLI command that prunes expendable backups from an S3 bucket.
"""

from __future__ import annotations

import json
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import RetentionConfig, get_config
from ..errors import ConfigurationError, StorageError
from ..logger import get_logger
from ..prune import PruneResult, build_strategy, parse_reference_time, run_prune
from ..storage import LIST_LIMIT, S3StorageClient
from .core import get_config_path

log = get_logger(__name__)
console = Console()


def _confirm(expendable: int, total: int) -> bool:
    return typer.confirm(
        f"This will delete {expendable} of {total} backups. Do you want to proceed?",
        default=False,
        err=True,
    )


def _print_expendable(result: PruneResult) -> None:
    table = Table(title="Expendable backups")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Backup")
    for i, backup_id in enumerate(result["expendable"], 1):
        table.add_row(str(i), escape(backup_id))
    console.print(table)


def prune_backups(
    ctx: typer.Context,
    region: Optional[str] = typer.Option(
        None,
        "--region",
        "-r",
        help="Region the S3 bucket containing the backups is located in (default from config)",
    ),
    bucket: Optional[str] = typer.Option(
        None,
        "--bucket",
        "-b",
        help="Name of the S3 bucket the backups are located in (default from config)",
    ),
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix",
        "-p",
        help="Prefix (directory) of the backups (default from config)",
    ),
    keep_all_within: Optional[int] = typer.Option(
        None,
        "--keep-all-within",
        min=0,
        help="Leave all backups within this many days unaltered",
    ),
    one_per_month_within: Optional[int] = typer.Option(
        None,
        "--one-per-month-within",
        min=0,
        help="Keep one backup per month within this many days; older ones are removed",
    ),
    one_per_month_tolerance: Optional[int] = typer.Option(
        None,
        "--one-per-month-tolerance",
        min=0,
        help="Days around the 1st of a month a backup may be to count for that month (default 15)",
    ),
    reference_time: Optional[str] = typer.Option(
        None,
        "--reference-time",
        help="ISO-8601 timestamp to measure backup ages from (default: now)",
    ),
    skip_confirmation: bool = typer.Option(
        False,
        "--skip-confirmation",
        "-y",
        help="Don't ask for confirmation before deleting",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be deleted without deleting anything",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
) -> None:
    """Delete expendable backups, keeping recent ones and one per month."""
    if json_output and not (skip_confirmation or dry_run):
        console.print(
            "[red]Error: --json needs --skip-confirmation or --dry-run, "
            "the prompt would corrupt the output[/red]"
        )
        raise typer.Exit(2)

    try:
        config = get_config(get_config_path(ctx))
        storage_config = config.app.storage
        retention = RetentionConfig(
            keep_all_within_days=(
                keep_all_within if keep_all_within is not None
                else config.app.retention.keep_all_within_days
            ),
            one_per_month_within_days=(
                one_per_month_within if one_per_month_within is not None
                else config.app.retention.one_per_month_within_days
            ),
            one_per_month_tolerance_days=(
                one_per_month_tolerance if one_per_month_tolerance is not None
                else config.app.retention.one_per_month_tolerance_days
            ),
        )
        reference = parse_reference_time(reference_time) if reference_time else None
        strategy = build_strategy(retention, reference)
        storage = S3StorageClient(
            region or storage_config.region,
            bucket or storage_config.bucket,
            prefix if prefix is not None else storage_config.prefix,
            timeout_seconds=storage_config.timeout_seconds,
            list_limit=storage_config.list_limit,
        )
    except (ConfigurationError, ValidationError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(2)

    log.debug("Pruning %s with %r", storage.location, strategy)

    announced = False

    def _print_found(found: int, truncated: bool) -> None:
        nonlocal announced
        if json_output or announced:
            return
        announced = True
        console.print(f"Found {found} backups.")
        if truncated:
            console.print(
                f"[yellow]Note: the S3 API only returns up to {LIST_LIMIT} stored files, so you "
                "might need to run this program several times to clean your bucket up completely.[/yellow]"
            )

    def _confirm_deletion(expendable: int, total: int) -> bool:
        _print_found(total, total >= LIST_LIMIT or storage.last_listing_truncated)
        if skip_confirmation:
            return True
        return _confirm(expendable, total)

    try:
        result = run_prune(storage, strategy, dry_run=dry_run, confirm=_confirm_deletion)
    except StorageError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        log.debug("Prune aborted", exc_info=True)
        raise typer.Exit(1)

    _print_found(result["found"], result["listing_truncated"])
    if json_output:
        typer.echo(json.dumps(result, indent=2))
    elif not result["expendable"]:
        console.print("No expendable backups found.")
    elif dry_run:
        _print_expendable(result)
        console.print(
            f"[blue]Dry run: would delete {len(result['expendable'])} of {result['found']} backups[/blue]"
        )
    elif not result["confirmed"]:
        console.print("[yellow]Deletion cancelled[/yellow]")
    else:
        console.print(f"[green]Deleted {result['deleted']} backups.[/green]")
        if result["failed"]:
            console.print(f"[red]✗ {result['failed']} backups could not be deleted[/red]")

    if not result["ok"]:
        raise typer.Exit(1)

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Callable, List, Optional, TypedDict

from .config import RetentionConfig
from .errors import StorageError
from .logger import get_logger, log_extra
from .prometheus_metrics import backups_deleted_total, backups_expendable_total, prune_runs_total
from .pruning import OlderThanButKeepOnePerMonth, PruningStrategy
from .records import BackupRecord
from .storage import LIST_LIMIT, StorageClient

log = get_logger(__name__)

# Called with (expendable count, total count); returns whether to go ahead
ConfirmCallback = Callable[[int, int], bool]


class PruneResult(TypedDict):
    ok: bool
    dry_run: bool
    confirmed: bool
    found: int
    listing_truncated: bool
    expendable: list[str]
    kept: list[str]
    deleted: int
    failed: int


def parse_reference_time(s: str) -> datetime:
    """Parse an ISO-8601 timestamp or plain date; naive values are UTC."""
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        try:
            dt = datetime.strptime(s, "%Y-%m-%d")
        except ValueError as e:
            raise ValueError(f"invalid ISO-8601 timestamp: {s!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def build_strategy(
    retention: RetentionConfig,
    reference_time: Optional[datetime] = None,
) -> OlderThanButKeepOnePerMonth:
    """Build the age-tiered strategy from day-valued settings.

    Raises ``ConfigurationError`` if the retention windows contradict each other.
    """
    return OlderThanButKeepOnePerMonth(
        reference_time or datetime.now(timezone.utc),
        keep_all_within=retention.keep_all_within,
        one_per_month_tolerance=retention.one_per_month_tolerance,
        one_per_month_within=retention.one_per_month_within,
    )


def _duplicate_ids(backups: List[BackupRecord]) -> list[str]:
    counts = Counter(backup.id for backup in backups)
    return sorted(backup_id for backup_id, n in counts.items() if n > 1)


def run_prune(
    storage: StorageClient,
    strategy: PruningStrategy,
    *,
    dry_run: bool = False,
    confirm: Optional[ConfirmCallback] = None,
) -> PruneResult:
    """
    List the stored backups, pick the expendable ones and delete them.

    ``confirm`` is asked before anything is deleted; without it the deletion
    goes ahead. Storage failures propagate as ``StorageError`` and abort the
    run.
    """
    try:
        backups = storage.stored_backups()
    except StorageError:
        prune_runs_total.labels(status="failed").inc()
        raise

    found = len(backups)
    log.info("Found %d backups", found, extra=log_extra(found=found))

    truncated = found >= LIST_LIMIT or storage.last_listing_truncated
    if truncated:
        log.warning(
            "The listing returned at most %d backups, so you might need to run "
            "the cleaner several times to clean up completely",
            LIST_LIMIT,
        )

    duplicates = _duplicate_ids(backups)
    if duplicates:
        log.warning("Listing contains duplicate backup ids: %s", ", ".join(duplicates))

    expendable = strategy.expendable_backups(backups)
    backups_expendable_total.inc(len(expendable))

    result: PruneResult = {
        "ok": True,
        "dry_run": dry_run,
        "confirmed": False,
        "found": found,
        "listing_truncated": truncated,
        "expendable": [backup.id for backup in expendable],
        "kept": [backup.id for backup in backups],
        "deleted": 0,
        "failed": 0,
    }

    if not expendable:
        log.info("No expendable backups found")
        prune_runs_total.labels(status="noop").inc()
        return result

    for backup in expendable:
        log.info(
            "Expendable: %s (%s)%s",
            backup.display_id,
            backup.timestamp.isoformat(),
            " [dry-run]" if dry_run else "",
            extra=log_extra(backup=backup.to_dict(), dry_run=dry_run),
        )

    if dry_run:
        prune_runs_total.labels(status="dry_run").inc()
        return result

    if confirm is not None and not confirm(len(expendable), len(expendable) + len(backups)):
        log.info("Deletion cancelled")
        prune_runs_total.labels(status="cancelled").inc()
        return result

    result["confirmed"] = True
    log.info("Removing %d expendable backups", len(expendable))
    try:
        deleted = storage.delete_backups(expendable)
    except StorageError:
        prune_runs_total.labels(status="failed").inc()
        raise

    backups_deleted_total.inc(deleted)
    result["deleted"] = deleted
    result["failed"] = max(len(expendable) - deleted, 0)

    if result["failed"]:
        result["ok"] = False
        log.error(
            "Only %d of %d expendable backups were deleted",
            deleted,
            len(expendable),
            extra=log_extra(deleted=deleted, failed=result["failed"]),
        )
        prune_runs_total.labels(status="partial").inc()
    else:
        log.info("Deleted %d backups", deleted, extra=log_extra(deleted=deleted))
        prune_runs_total.labels(status="success").inc()
    return result

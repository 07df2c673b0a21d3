"""Prometheus counters for prune runs.

The counters live in the default registry; a long-running wrapper can expose
them with ``prometheus_client.start_http_server`` or push them to a gateway.
"""

from __future__ import annotations

from prometheus_client import Counter

prune_runs_total = Counter(
    "backups_cleaner_prune_runs_total",
    "Total number of prune runs by outcome",
    ["status"],  # success, partial, cancelled, dry_run, noop, failed
)

backups_expendable_total = Counter(
    "backups_cleaner_backups_expendable_total",
    "Total number of backups found expendable by the pruning strategy",
)

backups_deleted_total = Counter(
    "backups_cleaner_backups_deleted_total",
    "Total number of backups the storage backend confirmed as deleted",
)

"""Decide which stored backups are expendable under a retention policy.

Usage:
    from datetime import datetime, timedelta, timezone

    from backups_cleaner import OlderThanButKeepOnePerMonth, S3StorageClient

    storage = S3StorageClient("eu-west-2", "my-database-backups", "psql_backups/")
    strategy = OlderThanButKeepOnePerMonth(
        datetime.now(timezone.utc),
        keep_all_within=timedelta(days=7),
        one_per_month_tolerance=timedelta(days=15),
        one_per_month_within=timedelta(days=365),
    )

    backups = storage.stored_backups()
    expendable = strategy.expendable_backups(backups)
    storage.delete_backups(expendable)
"""

from .errors import BackupsCleanerError, ConfigurationError, StorageError
from .pruning import KeepOnePerMonth, OlderThan, OlderThanButKeepOnePerMonth, PruningStrategy
from .records import BackupRecord
from .storage import LIST_LIMIT, S3StorageClient, StorageClient

__version__ = "0.1.0"

__all__ = [
    "BackupRecord",
    "BackupsCleanerError",
    "ConfigurationError",
    "KeepOnePerMonth",
    "LIST_LIMIT",
    "OlderThan",
    "OlderThanButKeepOnePerMonth",
    "PruningStrategy",
    "S3StorageClient",
    "StorageClient",
    "StorageError",
]

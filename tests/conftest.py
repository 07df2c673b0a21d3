from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, List
from unittest.mock import MagicMock

import pytest

from backups_cleaner.records import BackupRecord


@pytest.fixture
def build_backup() -> Callable[[str, datetime], BackupRecord]:
    """Build a record whose id and display id are both ``backup_id``."""

    def _build(backup_id: str, timestamp: datetime) -> BackupRecord:
        return BackupRecord(id=backup_id, display_id=backup_id, timestamp=timestamp)

    return _build


@pytest.fixture
def ids() -> Callable[[List[BackupRecord]], str]:
    """Collapse single-character ids into a string, e.g. ``"ABC"``."""

    def _ids(backups: List[BackupRecord]) -> str:
        return "".join(backup.id for backup in backups)

    return _ids


@pytest.fixture
def s3_client() -> MagicMock:
    """A stand-in for a boto3 S3 client with an empty bucket."""
    client = MagicMock()
    client.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}
    client.delete_objects.return_value = {"Deleted": []}
    return client


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    """An isolated settings.yaml pointing at a test bucket."""
    path = tmp_path / "settings.yaml"
    path.write_text(
        """
app:
  storage:
    region: "eu-west-2"
    bucket: "my-database-backups"
    prefix: "psql_backups/"
  retention:
    keep_all_within_days: 1
    one_per_month_within_days: 90
    one_per_month_tolerance_days: 15
""".strip(),
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "BACKUPS_CLEANER_CONFIG",
        "BACKUPS_CLEANER_REGION",
        "BACKUPS_CLEANER_BUCKET",
        "BACKUPS_CLEANER_PREFIX",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    # Keep settings.yaml files in the working directory from leaking into tests
    monkeypatch.chdir(tmp_path)

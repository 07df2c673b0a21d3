from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from ..logger import get_logger
from ..records import BackupRecord, as_utc
from .base import PruningStrategy, partition_by

log = get_logger(__name__)


class OlderThan(PruningStrategy):
    """Considers every backup older than ``duration`` from ``reference_time`` expendable.

    A backup exactly ``duration`` old is kept, as is anything dated after
    ``reference_time``. Both output lists keep the input's relative order.
    """

    def __init__(self, duration: timedelta, reference_time: datetime) -> None:
        self.duration = duration
        self.reference_time = as_utc(reference_time)

    def too_old(self, backup: BackupRecord) -> bool:
        return self.reference_time - backup.timestamp > self.duration

    def expendable_backups(self, backups: List[BackupRecord]) -> List[BackupRecord]:
        expendable = partition_by(backups, lambda _index, backup: self.too_old(backup))
        log.debug(
            "OlderThan(%s, %s): %d expendable, %d kept",
            self.duration,
            self.reference_time.isoformat(),
            len(expendable),
            len(backups),
        )
        return expendable

    def __repr__(self) -> str:
        return f"OlderThan(duration={self.duration!r}, reference_time={self.reference_time!r})"

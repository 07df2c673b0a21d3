from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from ..dates import CalendarMonth, is_closer
from ..logger import get_logger
from ..records import BackupRecord
from .base import PruningStrategy, partition_keeping_indices

log = get_logger(__name__)


class KeepOnePerMonth(PruningStrategy):
    """
    Keeps one backup for each month: the one closest to the 1st of that month.

    Only backups less than ``tolerance`` away from the 1st of a month are
    considered for it, so a month may end up with no backup at all. Months are
    visited oldest first and a backup picked for one month, along with every
    backup before it, is no longer available to the following months.

    The given list is sorted by timestamp as a side effect, so the kept
    backups come back in chronological order.
    """

    def __init__(self, tolerance: timedelta) -> None:
        self.tolerance = tolerance

    def _nearest_index(
        self,
        backups: List[BackupRecord],
        anchor: datetime,
        start_index: int,
    ) -> Optional[int]:
        """Index of the backup closest to ``anchor`` within the tolerance window.

        Scanning starts at ``start_index`` and stops at the first backup that
        is not strictly closer than the current candidate, so ties go to the
        earlier backup.
        """
        earliest = anchor - self.tolerance
        latest = anchor + self.tolerance
        nearest: Optional[int] = None

        for index in range(start_index, len(backups)):
            timestamp = backups[index].timestamp
            if nearest is None:
                if timestamp < earliest:
                    continue
                if timestamp > latest:
                    return None
                nearest = index
                continue

            if timestamp > latest:
                break
            if not is_closer(anchor, timestamp, backups[nearest].timestamp):
                break
            nearest = index

        return nearest

    def expendable_backups(self, backups: List[BackupRecord]) -> List[BackupRecord]:
        if not backups:
            return []

        backups.sort(key=lambda backup: backup.timestamp)

        month = CalendarMonth.of(backups[0].timestamp)
        last_month = CalendarMonth.of(backups[-1].timestamp).next()
        start_index = 0
        keep_indices: List[int] = []

        while month <= last_month:
            index = self._nearest_index(backups, month.first_instant(), start_index)
            if index is not None:
                log.debug("Keeping %s for %s", backups[index].display_id, month)
                keep_indices.append(index)
                start_index = index + 1
            month = month.next()

        expendable = partition_keeping_indices(backups, keep_indices)
        log.debug("KeepOnePerMonth(%s): %d expendable, %d kept", self.tolerance, len(expendable), len(backups))
        return expendable

    def __repr__(self) -> str:
        return f"KeepOnePerMonth(tolerance={self.tolerance!r})"

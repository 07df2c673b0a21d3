from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from ..errors import ConfigurationError
from ..logger import get_logger
from ..records import BackupRecord, as_utc
from .base import PruningStrategy
from .keep_one_per_month import KeepOnePerMonth
from .older_than import OlderThan

log = get_logger(__name__)


class OlderThanButKeepOnePerMonth(PruningStrategy):
    """
    Age-tiered retention with monthly decimation.

    - Backups within ``keep_all_within`` from ``reference_time`` are left alone.
    - Of the backups between ``keep_all_within`` and ``one_per_month_within``,
      one per month is kept (see ``KeepOnePerMonth``), using
      ``one_per_month_tolerance`` around the 1st of each month.
    - Backups older than ``one_per_month_within`` are all expendable.

    Expendable backups are returned as the very old ones in input order,
    followed by the ones dropped by the monthly pass in chronological order.
    The kept backups end up as the recent ones in input order, followed by
    the monthly survivors in chronological order.

    Raises:
        ConfigurationError: if ``keep_all_within`` exceeds ``one_per_month_within``.
    """

    def __init__(
        self,
        reference_time: datetime,
        keep_all_within: timedelta,
        one_per_month_tolerance: timedelta,
        one_per_month_within: timedelta,
    ) -> None:
        if keep_all_within > one_per_month_within:
            raise ConfigurationError(
                f"keep_all_within ({keep_all_within}) must not exceed "
                f"one_per_month_within ({one_per_month_within})"
            )

        self.reference_time = as_utc(reference_time)
        self.keep_all_within = keep_all_within
        self.one_per_month_tolerance = one_per_month_tolerance
        self.one_per_month_within = one_per_month_within

    def expendable_backups(self, backups: List[BackupRecord]) -> List[BackupRecord]:
        expendable = OlderThan(self.one_per_month_within, self.reference_time).expendable_backups(backups)

        older_backups = OlderThan(self.keep_all_within, self.reference_time).expendable_backups(backups)
        expendable.extend(KeepOnePerMonth(self.one_per_month_tolerance).expendable_backups(older_backups))
        backups.extend(older_backups)

        log.debug("%d of %d backups are expendable", len(expendable), len(expendable) + len(backups))
        return expendable

    def __repr__(self) -> str:
        return (
            "OlderThanButKeepOnePerMonth("
            f"reference_time={self.reference_time!r}, "
            f"keep_all_within={self.keep_all_within!r}, "
            f"one_per_month_tolerance={self.one_per_month_tolerance!r}, "
            f"one_per_month_within={self.one_per_month_within!r})"
        )

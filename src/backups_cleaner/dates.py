"""Calendar-month helpers used by the monthly decimation strategy.

All values are UTC. A month is identified by ``CalendarMonth(year, month)``;
its anchor is the first instant of its first day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True, order=True)
class CalendarMonth:
    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @classmethod
    def of(cls, instant: datetime) -> CalendarMonth:
        if instant.tzinfo is not None:
            instant = instant.astimezone(timezone.utc)
        return cls(instant.year, instant.month)

    def first_instant(self) -> datetime:
        return datetime(self.year, self.month, 1, tzinfo=timezone.utc)

    def next(self) -> CalendarMonth:
        if self.month == 12:
            return CalendarMonth(self.year + 1, 1)
        return CalendarMonth(self.year, self.month + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def beginning_of_month(instant: datetime) -> datetime:
    """Return the first instant of the month containing ``instant``."""
    return CalendarMonth.of(instant).first_instant()


def beginning_of_next_month(instant: datetime) -> datetime:
    """Return the first instant of the month following the one containing ``instant``."""
    return CalendarMonth.of(instant).next().first_instant()


def _whole_seconds_between(a: datetime, b: datetime) -> int:
    # int() truncates toward zero, so -0.5s and 0.5s both count as 0
    return abs(int((a - b).total_seconds()))


def is_closer(target: datetime, candidate: datetime, current: datetime) -> bool:
    """Return True if ``candidate`` is strictly closer to ``target`` than ``current``.

    Distances are compared in whole seconds; ties return False.
    """
    return _whole_seconds_between(candidate, target) < _whole_seconds_between(current, target)

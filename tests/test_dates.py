from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backups_cleaner.dates import CalendarMonth, beginning_of_month, beginning_of_next_month, is_closer

UTC = timezone.utc


def test_beginning_of_month() -> None:
    assert beginning_of_month(datetime(2014, 7, 19, 21, 46, 12, tzinfo=UTC)) == datetime(2014, 7, 1, tzinfo=UTC)


def test_beginning_of_month_on_first_instant_is_identity() -> None:
    first = datetime(2014, 7, 1, tzinfo=UTC)
    assert beginning_of_month(first) == first


def test_beginning_of_next_month() -> None:
    assert beginning_of_next_month(datetime(2014, 7, 31, 23, 59, 59, tzinfo=UTC)) == datetime(2014, 8, 1, tzinfo=UTC)


def test_beginning_of_next_month_carries_the_year() -> None:
    assert beginning_of_next_month(datetime(2014, 12, 15, tzinfo=UTC)) == datetime(2015, 1, 1, tzinfo=UTC)


def test_month_of_converts_to_utc() -> None:
    # 2014-08-01 01:00 at +02:00 is still July in UTC
    plus_two = timezone(timedelta(hours=2))
    assert CalendarMonth.of(datetime(2014, 8, 1, 1, 0, tzinfo=plus_two)) == CalendarMonth(2014, 7)


def test_calendar_month_ordering_and_next() -> None:
    december = CalendarMonth(2014, 12)
    january = december.next()

    assert january == CalendarMonth(2015, 1)
    assert december < january
    assert str(january) == "2015-01"


def test_calendar_month_rejects_invalid_month() -> None:
    with pytest.raises(ValueError):
        CalendarMonth(2014, 13)


def test_is_closer() -> None:
    target = datetime(2014, 6, 1, tzinfo=UTC)

    assert is_closer(target, target + timedelta(hours=1), target - timedelta(days=1))
    assert not is_closer(target, target + timedelta(days=2), target - timedelta(days=1))


def test_is_closer_tie_is_not_closer() -> None:
    target = datetime(2014, 6, 1, tzinfo=UTC)

    assert not is_closer(target, target + timedelta(days=1), target - timedelta(days=1))


def test_is_closer_ignores_sub_second_differences() -> None:
    target = datetime(2014, 6, 1, tzinfo=UTC)

    assert not is_closer(target, target + timedelta(seconds=1), target + timedelta(seconds=1, milliseconds=900))

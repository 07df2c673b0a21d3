from __future__ import annotations

from datetime import datetime, timedelta, timezone

from backups_cleaner.pruning import OlderThan

UTC = timezone.utc
REFERENCE_TIME = datetime(2014, 11, 14, 8, 9, 10, tzinfo=UTC)


def test_expendable_backups(build_backup, ids) -> None:
    strategy = OlderThan(timedelta(minutes=1), REFERENCE_TIME)
    backups = [
        # A day after the reference time is not expendable
        build_backup("0", datetime(2014, 11, 15, 8, 9, 10, tzinfo=UTC)),
        # One second more than `duration` old is expendable
        build_backup("C", datetime(2014, 11, 14, 8, 8, 9, tzinfo=UTC)),
        # Same instant as the reference time
        build_backup("A", datetime(2014, 11, 14, 8, 9, 10, tzinfo=UTC)),
        # Very old
        build_backup("D", datetime(2013, 11, 14, 8, 9, 10, tzinfo=UTC)),
        # Exactly `duration` old is kept
        build_backup("B", datetime(2014, 11, 14, 8, 8, 10, tzinfo=UTC)),
    ]

    expendable = strategy.expendable_backups(backups)

    assert ids(expendable) == "CD"
    assert ids(backups) == "0AB"


def test_expendable_backups_with_no_backups_given() -> None:
    strategy = OlderThan(timedelta(minutes=1), REFERENCE_TIME)
    backups = []

    assert strategy.expendable_backups(backups) == []
    assert backups == []


def test_expendable_backups_mutates_the_given_list(build_backup) -> None:
    strategy = OlderThan(timedelta(days=1), REFERENCE_TIME)
    backups = [build_backup("A", REFERENCE_TIME - timedelta(days=2))]
    same_list = backups

    strategy.expendable_backups(backups)

    assert same_list is backups
    assert backups == []


def test_naive_reference_time_is_utc(build_backup, ids) -> None:
    strategy = OlderThan(timedelta(minutes=1), datetime(2014, 11, 14, 8, 9, 10))
    backups = [
        build_backup("A", datetime(2014, 11, 14, 8, 8, 10, tzinfo=UTC)),
        build_backup("B", datetime(2014, 11, 14, 8, 8, 9, tzinfo=UTC)),
    ]

    assert ids(strategy.expendable_backups(backups)) == "B"
    assert ids(backups) == "A"

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, List

from ..records import BackupRecord


class PruningStrategy(ABC):
    """Contract shared by every pruning strategy.

    ``expendable_backups`` removes the expendable records from ``backups`` in
    place and returns them. Together, the mutated list and the returned list
    always hold exactly the records that were passed in. Strategies may leave
    the kept records in a different order than they arrived in.
    """

    @abstractmethod
    def expendable_backups(self, backups: List[BackupRecord]) -> List[BackupRecord]:
        raise NotImplementedError


def partition_by(
    backups: List[BackupRecord],
    is_expendable: Callable[[int, BackupRecord], bool],
) -> List[BackupRecord]:
    """Split ``backups`` in one pass, keeping the relative order of both halves.

    The kept records are written back into ``backups``; the expendable ones
    are returned.
    """
    kept: List[BackupRecord] = []
    expendable: List[BackupRecord] = []
    for index, backup in enumerate(backups):
        if is_expendable(index, backup):
            expendable.append(backup)
        else:
            kept.append(backup)
    backups[:] = kept
    return expendable


def partition_keeping_indices(backups: List[BackupRecord], keep: Iterable[int]) -> List[BackupRecord]:
    keep_indices = set(keep)
    return partition_by(backups, lambda index, _backup: index not in keep_indices)

"""Strategies for deciding which of the stored backups are expendable."""

from .base import PruningStrategy
from .keep_one_per_month import KeepOnePerMonth
from .older_than import OlderThan
from .older_than_but_keep_history import OlderThanButKeepOnePerMonth

__all__ = [
    "KeepOnePerMonth",
    "OlderThan",
    "OlderThanButKeepOnePerMonth",
    "PruningStrategy",
]

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class BackupRecord:
    """A single stored backup as seen by the pruning strategies.

    ``id`` addresses the object in the storage backend, ``display_id`` is only
    used for output. ``timestamp`` is always a UTC-aware datetime; naive values
    are taken to be UTC.
    """
    id: str
    display_id: str
    timestamp: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))

    @classmethod
    def from_key(cls, key: str, timestamp: datetime) -> BackupRecord:
        return cls(id=key, display_id=key, timestamp=timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "display_id": self.display_id,
            "timestamp": self.timestamp.isoformat(),
        }

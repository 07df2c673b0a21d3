"""
Storage clients that list and delete backups.

Each client implements ``StorageClient`` so the prune run works the same way
for whatever backend holds the backups.

S3 notes:
    ``S3StorageClient`` issues a single ``ListObjectsV2`` call per run, which
    returns at most 1000 objects. With more backups than that under the
    prefix, run the cleaner several times in a row.

    Credentials are resolved by boto3 (environment variables such as
    ``AWS_ACCESS_KEY_ID``/``AWS_SECRET_ACCESS_KEY``, shared config files or an
    instance role). The principal needs ``s3:ListBucket`` on the bucket and
    ``s3:DeleteObject`` on ``<bucket>/<prefix>*``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConfigurationError, StorageError
from .logger import get_logger
from .records import BackupRecord

log = get_logger(__name__)

# Maximum number of keys ListObjectsV2 returns and DeleteObjects accepts per call
LIST_LIMIT = 1000
DELETE_BATCH_SIZE = 1000


class StorageClient(ABC):
    """Methods required to use a backend for pruning."""

    # Set by clients that can tell when a listing stopped short of the full set
    last_listing_truncated: bool = False

    @abstractmethod
    def stored_backups(self) -> List[BackupRecord]:
        """Return all stored backups the backend lists for this client."""

    @abstractmethod
    def delete_backups(self, backups: List[BackupRecord]) -> int:
        """Delete ``backups`` and return the number of confirmed deletions."""


class S3StorageClient(StorageClient):
    """Lists and deletes backups stored under ``s3://<bucket>/<prefix>``."""

    def __init__(
        self,
        region: str,
        bucket: str,
        prefix: str = "",
        *,
        client: Any = None,
        timeout_seconds: float = 3.0,
        list_limit: int = LIST_LIMIT,
    ) -> None:
        if not region:
            raise ConfigurationError("an S3 region is required")
        if not bucket:
            raise ConfigurationError("an S3 bucket is required")
        if not 1 <= list_limit <= LIST_LIMIT:
            raise ConfigurationError(f"list_limit must be between 1 and {LIST_LIMIT}, got {list_limit}")

        self.region = region
        self.bucket = bucket
        self.prefix = prefix
        self.list_limit = list_limit
        self.last_listing_truncated = False

        if client is None:
            client = boto3.client(
                "s3",
                region_name=region,
                config=BotoConfig(
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                    retries={"max_attempts": 3, "mode": "standard"},
                ),
            )
        self._client = client

    @property
    def location(self) -> str:
        return f"s3://{self.bucket}/{self.prefix}"

    def _object_to_backup(self, obj: Dict[str, Any]) -> BackupRecord:
        return BackupRecord.from_key(obj["Key"], obj["LastModified"])

    def stored_backups(self) -> List[BackupRecord]:
        log.debug("Listing backups in %s (max %d)", self.location, self.list_limit)
        try:
            response = self._client.list_objects_v2(
                Bucket=self.bucket,
                Prefix=self.prefix,
                MaxKeys=self.list_limit,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to list backups in {self.location}: {e}") from e

        self.last_listing_truncated = bool(response.get("IsTruncated"))
        contents = response.get("Contents") or []
        return [self._object_to_backup(obj) for obj in contents]

    def delete_backups(self, backups: List[BackupRecord]) -> int:
        if not backups:
            return 0

        deleted = 0
        for start in range(0, len(backups), DELETE_BATCH_SIZE):
            chunk = backups[start:start + DELETE_BATCH_SIZE]
            log.debug("Deleting %d objects from s3://%s", len(chunk), self.bucket)
            try:
                response = self._client.delete_objects(
                    Bucket=self.bucket,
                    Delete={
                        "Objects": [{"Key": backup.id} for backup in chunk],
                        "Quiet": False,
                    },
                )
            except (BotoCoreError, ClientError) as e:
                raise StorageError(
                    f"Failed to delete backups from s3://{self.bucket} after {deleted} deletions: {e}"
                ) from e

            for error in response.get("Errors") or []:
                log.warning(
                    "Could not delete %s: %s %s",
                    error.get("Key"),
                    error.get("Code"),
                    error.get("Message"),
                )
            deleted += len(response.get("Deleted") or [])

        return deleted

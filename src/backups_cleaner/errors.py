from __future__ import annotations


class BackupsCleanerError(Exception):
    """Base class for errors raised by backups_cleaner."""


class ConfigurationError(BackupsCleanerError, ValueError):
    """Raised when a strategy or client is built from contradictory options."""


class StorageError(BackupsCleanerError):
    """Raised when listing or deleting backups in the storage backend fails."""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError
from .logger import get_logger

log = get_logger(__name__)


class StorageConfig(BaseModel):
    """S3 location of the backups."""
    region: str = ""
    bucket: str = ""
    prefix: str = ""
    timeout_seconds: float = Field(default=3.0, gt=0)
    list_limit: int = Field(default=1000, ge=1, le=1000)


class RetentionConfig(BaseModel):
    """Retention policy, expressed in days."""
    keep_all_within_days: int = Field(default=7, ge=0)
    one_per_month_within_days: int = Field(default=365, ge=0)
    one_per_month_tolerance_days: int = Field(default=15, ge=0)

    @property
    def keep_all_within(self) -> timedelta:
        return timedelta(days=self.keep_all_within_days)

    @property
    def one_per_month_within(self) -> timedelta:
        return timedelta(days=self.one_per_month_within_days)

    @property
    def one_per_month_tolerance(self) -> timedelta:
        return timedelta(days=self.one_per_month_tolerance_days)


class AppConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    retention: RetentionConfig = Field(default_factory=RetentionConfig)


class Settings(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)


def _find_settings_path(explicit: Optional[str]) -> Optional[Path]:
    candidates = []
    if explicit:
        candidates.append(Path(explicit))
    env = os.getenv("BACKUPS_CLEANER_CONFIG")
    if env:
        candidates.append(Path(env))
    candidates.extend([
        Path("settings.yaml"),
        Path("settings.yml"),
        Path("config/settings.yaml"),
    ])
    for p in candidates:
        if p and p.exists() and p.is_file():
            return p
    return None


def _apply_env_overrides(s: Settings) -> Settings:
    if region := os.getenv("BACKUPS_CLEANER_REGION"):
        s.app.storage.region = region
    if bucket := os.getenv("BACKUPS_CLEANER_BUCKET"):
        s.app.storage.bucket = bucket
    if (prefix := os.getenv("BACKUPS_CLEANER_PREFIX")) is not None:
        s.app.storage.prefix = prefix
    return s


def load_settings(path: Optional[str] = None) -> Settings:
    p = _find_settings_path(path)
    if not p:
        if path:
            log.warning("Settings file %s not found; using defaults", path)
        else:
            log.debug("No settings file found; using defaults")
        return _apply_env_overrides(Settings())

    with open(p, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            log.error("Settings file %s is not valid YAML: %s", p, e)
            raise ConfigurationError(f"settings file {p} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        log.error("Settings file %s must contain a mapping, got %s", p, type(raw).__name__)
        raise ConfigurationError(f"settings file {p} must contain a mapping, got {type(raw).__name__}")
    try:
        s = Settings(**raw)
    except ValidationError as e:
        log.error("Settings validation failed: %s", e)
        raise
    return _apply_env_overrides(s)


def get_config(path: Optional[str] = None) -> Settings:
    """Get validated settings."""
    return load_settings(path)

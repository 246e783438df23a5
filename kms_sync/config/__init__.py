"""Configuration module: environment-driven settings."""

from kms_sync.config.settings import SyncSettings

__all__ = ["SyncSettings"]

"""Pipeline services: selection policy and run orchestration."""

from kms_sync.services.selector import select
from kms_sync.services.sync_pipeline import SyncPipeline, record_type_for

__all__ = ["SyncPipeline", "record_type_for", "select"]

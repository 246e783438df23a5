"""Public models for the KMS sync job."""

from kms_sync.models.endpoint import DEFAULT_KMS_PORT, CandidateSet, Endpoint
from kms_sync.models.report import SyncReport

__all__ = [
    "DEFAULT_KMS_PORT",
    "CandidateSet",
    "Endpoint",
    "SyncReport",
]

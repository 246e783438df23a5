"""External collaborators: GitHub issue source and Cloudflare DNS publisher."""

from kms_sync.integration.base import DnsPublisher, RecordType, SourceTextProvider
from kms_sync.integration.cloudflare import CloudflareDnsClient
from kms_sync.integration.issue_source import IssueSourceClient

__all__ = [
    "CloudflareDnsClient",
    "DnsPublisher",
    "IssueSourceClient",
    "RecordType",
    "SourceTextProvider",
]

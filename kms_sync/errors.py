"""Error hierarchy for the KMS sync job.

All sync-specific errors extend KmsSyncError. Recoverable errors (source
fetch, empty extraction) are caught inside the pipeline and turned into the
fallback candidate list; fatal errors propagate to the entry point, which
logs them verbatim and exits with the error's ``exit_code``.
"""

from __future__ import annotations


class KmsSyncError(Exception):
    """Base error for all sync-specific errors."""

    exit_code: int = 1
    message: str = "KMS sync failed"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(KmsSyncError):
    """Missing or invalid settings."""

    exit_code = 1
    message = "Invalid configuration"


class SourceFetchError(KmsSyncError):
    """Fetching the source text failed (network, auth, rate limit)."""

    exit_code = 1
    message = "Failed to fetch source text"


class ExtractionEmptyError(KmsSyncError):
    """No candidate endpoints could be extracted from the source text."""

    exit_code = 1
    message = "No candidate endpoints found in source text"


class NoReachableEndpointError(KmsSyncError):
    """Every probed candidate was unreachable."""

    exit_code = 2
    message = "No reachable KMS endpoint found"


class PublishError(KmsSyncError):
    """The DNS provider rejected the record upsert."""

    exit_code = 3
    message = "Failed to publish DNS record"

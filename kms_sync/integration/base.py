"""Collaborator boundaries used by the sync pipeline.

The pipeline only talks to these two abstractions; the GitHub and Cloudflare
clients implement them, and tests substitute in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal

RecordType = Literal["A", "CNAME"]


class SourceTextProvider(ABC):
    """Supplies the free-form text that candidates are extracted from."""

    @abstractmethod
    async def fetch_source_text(self) -> str:
        """Return the source text.

        Raises
        ------
        SourceFetchError
            If the text cannot be retrieved.
        """
        ...


class DnsPublisher(ABC):
    """Create-or-update access to a single DNS record."""

    @abstractmethod
    async def upsert(
        self,
        record_name: str,
        record_type: RecordType,
        content: str,
        ttl: int,
    ) -> str:
        """Point *record_name* at *content*, creating the record if needed.

        Returns the provider's record id.

        Raises
        ------
        PublishError
            If the provider rejects the change.
        """
        ...

"""Sync pipeline: orchestrates one discovery-and-publish run.

Coordinates the stages in strict order: fetch source text, extract candidates,
probe reachability, select the first reachable endpoint, upsert the DNS record.

Source fetch failures and empty extractions fall back to the static server
list. An empty selection raises ``NoReachableEndpointError`` before anything
is published; publisher failures propagate as ``PublishError``.
"""

from __future__ import annotations

import logging

from kms_sync.config.settings import SyncSettings
from kms_sync.errors import NoReachableEndpointError, SourceFetchError
from kms_sync.extractors.endpoint_extractor import EndpointExtractor
from kms_sync.integration.base import DnsPublisher, RecordType, SourceTextProvider
from kms_sync.integration.cloudflare import CloudflareDnsClient
from kms_sync.integration.issue_source import IssueSourceClient
from kms_sync.models.endpoint import CandidateSet, Endpoint
from kms_sync.models.report import SyncReport
from kms_sync.probe.prober import TcpProber
from kms_sync.services.selector import select

logger = logging.getLogger(__name__)


def record_type_for(endpoint: Endpoint) -> RecordType:
    """``A`` for IPv4 literals, ``CNAME`` for domain names."""
    return "A" if endpoint.is_ipv4 else "CNAME"


class SyncPipeline:
    """Runs a single KMS sync.

    Dependencies are injected via the constructor so the pipeline is
    testable without network access.
    """

    def __init__(
        self,
        *,
        source: SourceTextProvider,
        extractor: EndpointExtractor,
        prober: TcpProber,
        publisher: DnsPublisher,
        record_name: str,
        ttl: int = 120,
    ) -> None:
        self._source = source
        self._extractor = extractor
        self._prober = prober
        self._publisher = publisher
        self._record_name = record_name
        self._ttl = ttl

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> SyncPipeline:
        """Wire the GitHub, TCP and Cloudflare implementations from settings."""
        return cls(
            source=IssueSourceClient(
                owner=settings.issue_owner,
                repo=settings.issue_repo,
                issue_number=settings.issue_number,
                token=settings.github_token,
                api_url=settings.github_api_url,
                timeout_seconds=settings.http_timeout_seconds,
                max_retries=settings.source_max_retries,
            ),
            extractor=EndpointExtractor(),
            prober=TcpProber(
                timeout_seconds=settings.probe_timeout_seconds,
                max_concurrency=settings.probe_concurrency,
            ),
            publisher=CloudflareDnsClient(
                api_token=settings.cloudflare_api_token,
                zone_id=settings.cloudflare_zone_id,
                api_url=settings.cloudflare_api_url,
                timeout_seconds=settings.http_timeout_seconds,
            ),
            record_name=settings.dns_record_name,
            ttl=settings.dns_ttl,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> SyncReport:
        """Execute the full pipeline once.

        Raises
        ------
        NoReachableEndpointError
            If no candidate accepted a connection. Nothing is published.
        PublishError
            If the DNS provider rejected the upsert.
        """
        logger.info("Starting KMS server sync process for %s", self._record_name)

        candidates = await self.discover()
        report = SyncReport(
            source="fallback" if candidates.from_fallback else "issue",
            candidates=list(candidates),
        )

        report.results = await self._prober.probe_all(report.candidates)
        logger.info(
            "Valid KMS servers: %s",
            [r.endpoint.key for r in report.results if r.reachable],
        )

        selected = select(report.results)
        if selected is None:
            raise NoReachableEndpointError(
                f"No reachable KMS server among {len(report.candidates)} candidates, "
                f"DNS record {self._record_name} not updated",
                candidate_count=len(report.candidates),
            )
        report.selected = selected
        report.record_type = record_type_for(selected)
        logger.info("Selected KMS server: %s", selected, extra={"endpoint": selected.key})

        report.record_id = await self._publisher.upsert(
            self._record_name,
            report.record_type,
            selected.host,
            self._ttl,
        )
        logger.info(
            "DNS record %s now points to %s",
            self._record_name,
            selected.host,
            extra={
                "record_name": self._record_name,
                "record_type": report.record_type,
                "record_id": report.record_id,
            },
        )
        return report

    async def discover(self) -> CandidateSet:
        """Fetch the source text and extract candidates, falling back as needed."""
        try:
            text = await self._source.fetch_source_text()
        except SourceFetchError as exc:
            logger.warning(
                "Source fetch failed, using fallback KMS server list: %s",
                exc.message,
                extra={"source": "fallback", "error_reason": exc.message},
            )
            return self._extractor.fallback()

        candidates = self._extractor.extract(text)
        logger.info(
            "Found %d KMS server candidates",
            len(candidates),
            extra={
                "candidate_count": len(candidates),
                "source": "fallback" if candidates.from_fallback else "issue",
            },
        )
        return candidates

"""Shared test fixtures and in-memory fakes for the kms-sync test suite."""

from __future__ import annotations

import asyncio
import os

import pytest

from kms_sync.config.settings import SyncSettings
from kms_sync.errors import PublishError, SourceFetchError
from kms_sync.integration.base import DnsPublisher, SourceTextProvider


# ---------------------------------------------------------------------------
# Ensure required env vars are set for SyncSettings in tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set minimal env vars so SyncSettings can be instantiated in tests."""
    defaults = {
        "CLOUDFLARE_API_TOKEN": "test-cf-token",
        "CLOUDFLARE_ZONE_ID": "zone-123",
        "DNS_RECORD_NAME": "kms.example.org",
    }
    for key, value in defaults.items():
        if key not in os.environ:
            monkeypatch.setenv(key, value)


@pytest.fixture
def settings() -> SyncSettings:
    """Test settings with safe defaults."""
    return SyncSettings(
        cloudflare_api_token="test-cf-token",
        cloudflare_zone_id="zone-123",
        dns_record_name="kms.example.org",
        probe_timeout_seconds=0.2,
        probe_concurrency=4,
    )


# ---------------------------------------------------------------------------
# Fake transport for the prober
# ---------------------------------------------------------------------------


class FakeWriter:
    """Stands in for ``asyncio.StreamWriter``; counts close calls."""

    def __init__(self) -> None:
        self.close_calls = 0
        self.wait_closed_calls = 0

    def close(self) -> None:
        self.close_calls += 1

    async def wait_closed(self) -> None:
        self.wait_closed_calls += 1


class FakeTransport:
    """Connector that accepts only ``host:port`` keys in *accept*.

    Other keys raise the exception configured in *failures* (default
    ``ConnectionRefusedError``). Keys in *delays* sleep first, which lets
    tests trigger timeouts.
    """

    def __init__(
        self,
        accept: set[str] | None = None,
        failures: dict[str, BaseException] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.accept = accept or set()
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: list[str] = []
        self.writers: dict[str, FakeWriter] = {}
        self.active = 0
        self.max_active = 0

    async def __call__(self, host: str, port: int):
        key = f"{host}:{port}"
        self.calls.append(key)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
            if key in self.accept:
                writer = FakeWriter()
                self.writers[key] = writer
                return object(), writer
            raise self.failures.get(key, ConnectionRefusedError(111, "Connection refused"))
        finally:
            self.active -= 1


@pytest.fixture
def transport_factory():
    return FakeTransport


# ---------------------------------------------------------------------------
# Fake collaborators for the pipeline
# ---------------------------------------------------------------------------


class FakeSource(SourceTextProvider):
    def __init__(self, text: str = "", fail: bool = False) -> None:
        self.text = text
        self.fail = fail
        self.calls = 0

    async def fetch_source_text(self) -> str:
        self.calls += 1
        if self.fail:
            raise SourceFetchError("Failed to fetch issue: 403 Forbidden", status_code=403)
        return self.text


class FakePublisher(DnsPublisher):
    def __init__(self, record_id: str = "rec-123", error: PublishError | None = None) -> None:
        self.record_id = record_id
        self.error = error
        self.calls: list[dict] = []

    async def upsert(self, record_name, record_type, content, ttl) -> str:
        self.calls.append(
            {
                "record_name": record_name,
                "record_type": record_type,
                "content": content,
                "ttl": ttl,
            }
        )
        if self.error is not None:
            raise self.error
        return self.record_id


@pytest.fixture
def source_factory():
    return FakeSource


@pytest.fixture
def publisher_factory():
    return FakePublisher

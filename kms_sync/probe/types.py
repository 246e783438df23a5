"""Probe data models for the reachability prober."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kms_sync.models.endpoint import Endpoint


class ProbeErrorKind(str, Enum):
    """Why a connection attempt failed."""

    TIMEOUT = "timeout"
    REFUSED = "refused"
    DNS_FAILURE = "dns_failure"
    RESET = "reset"
    UNREACHABLE = "unreachable"
    OTHER = "other"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single TCP connection attempt."""

    endpoint: Endpoint
    reachable: bool
    error: ProbeErrorKind | None = None
    latency_ms: float | None = None
    detail: str | None = None

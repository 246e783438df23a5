"""Per-run summary produced by the sync pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from kms_sync.models.endpoint import Endpoint
from kms_sync.probe.types import ProbeResult


@dataclass
class SyncReport:
    """What a single sync run saw and did. Nothing here is persisted."""

    source: str  # "issue" or "fallback"
    candidates: list[Endpoint] = field(default_factory=list)
    results: list[ProbeResult] = field(default_factory=list)
    selected: Endpoint | None = None
    record_type: str | None = None
    record_id: str | None = None

    @property
    def reachable_count(self) -> int:
        return sum(1 for r in self.results if r.reachable)

    def summary(self) -> dict:
        """Return a JSON-serialisable summary for the final log line."""
        return {
            "source": self.source,
            "candidate_count": len(self.candidates),
            "reachable_count": self.reachable_count,
            "selected": self.selected.key if self.selected else None,
            "record_type": self.record_type,
            "record_id": self.record_id,
        }

"""First-reachable endpoint selection.

The first reachable result in probe order wins. Latency and randomness play
no part, so the same candidates and the same live servers always produce
the same choice.
"""

from __future__ import annotations

from collections.abc import Iterable

from kms_sync.models.endpoint import Endpoint
from kms_sync.probe.types import ProbeResult


def select(results: Iterable[ProbeResult]) -> Endpoint | None:
    """Return the endpoint of the first reachable result, or None."""
    for result in results:
        if result.reachable:
            return result.endpoint
    return None

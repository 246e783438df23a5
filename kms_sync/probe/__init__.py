"""Reachability probing package: TCP connect probes with a bounded worker pool."""

from kms_sync.probe.prober import TcpProber, classify_error
from kms_sync.probe.types import ProbeErrorKind, ProbeResult

__all__ = ["ProbeErrorKind", "ProbeResult", "TcpProber", "classify_error"]

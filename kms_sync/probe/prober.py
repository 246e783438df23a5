"""TCP reachability prober with a bounded worker pool.

Each candidate gets one connection attempt bounded by ``timeout_seconds``.
Failures are classified into ``ProbeErrorKind`` and reported as
``reachable=False``; nothing raised by a single attempt escapes the batch.

``probe_all`` starts at most ``max_concurrency`` worker tasks that pull
``(index, endpoint)`` items from a queue and write results into a pre-sized
slot list, so output order always equals input order.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import socket
import time
from collections.abc import Awaitable, Callable, Sequence

from kms_sync.models.endpoint import Endpoint
from kms_sync.probe.types import ProbeErrorKind, ProbeResult

logger = logging.getLogger(__name__)

Connector = Callable[[str, int], Awaitable[tuple[asyncio.StreamReader, asyncio.StreamWriter]]]

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_CONCURRENCY = 8
MAX_CONCURRENCY_CAP = 16

_UNREACHABLE_ERRNOS = {errno.ENETUNREACH, errno.EHOSTUNREACH, errno.EHOSTDOWN}


def classify_error(exc: BaseException) -> ProbeErrorKind:
    """Map a connection exception to a ``ProbeErrorKind``."""
    if isinstance(exc, asyncio.TimeoutError):
        return ProbeErrorKind.TIMEOUT
    if isinstance(exc, socket.gaierror):
        return ProbeErrorKind.DNS_FAILURE
    if isinstance(exc, ConnectionRefusedError):
        return ProbeErrorKind.REFUSED
    if isinstance(exc, ConnectionResetError):
        return ProbeErrorKind.RESET
    if isinstance(exc, OSError):
        # Multi-address connects raise a bare OSError with errno None.
        if exc.errno is None or exc.errno in _UNREACHABLE_ERRNOS:
            return ProbeErrorKind.UNREACHABLE
        return ProbeErrorKind.OTHER
    return ProbeErrorKind.OTHER


async def _close_writer(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except (OSError, asyncio.TimeoutError):
        logger.debug("Error while closing probe connection", exc_info=True)


class TcpProber:
    """Probes endpoints for TCP reachability.

    Parameters
    ----------
    timeout_seconds:
        Per-attempt connect timeout (default 5s).
    max_concurrency:
        Maximum simultaneous connection attempts, capped at 16.
    connector:
        Coroutine function ``(host, port) -> (reader, writer)``. Defaults to
        ``asyncio.open_connection``; tests inject a fake transport here.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        connector: Connector | None = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._timeout_seconds = timeout_seconds
        self._max_concurrency = min(max_concurrency, MAX_CONCURRENCY_CAP)
        self._connector: Connector = connector or asyncio.open_connection

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    # ------------------------------------------------------------------
    # Single probe
    # ------------------------------------------------------------------

    async def probe(self, endpoint: Endpoint, timeout: float | None = None) -> ProbeResult:
        """Attempt one TCP connection to *endpoint*."""
        timeout = self._timeout_seconds if timeout is None else timeout
        start = time.monotonic()

        try:
            _reader, writer = await self._connect(endpoint, timeout)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            kind = classify_error(exc)
            detail = str(exc) or type(exc).__name__
            if kind is ProbeErrorKind.TIMEOUT:
                detail = f"connection timed out after {timeout}s"
            logger.info(
                "KMS server %s unreachable (%s): %s",
                endpoint,
                kind.value,
                detail,
                extra={"endpoint": endpoint.key, "reachable": False, "error_kind": kind.value},
            )
            return ProbeResult(endpoint=endpoint, reachable=False, error=kind, detail=detail)

        latency_ms = round((time.monotonic() - start) * 1000, 2)
        await _close_writer(writer)

        logger.info(
            "KMS server %s is reachable (%.1fms)",
            endpoint,
            latency_ms,
            extra={"endpoint": endpoint.key, "reachable": True, "latency_ms": latency_ms},
        )
        return ProbeResult(endpoint=endpoint, reachable=True, latency_ms=latency_ms)

    async def _connect(
        self, endpoint: Endpoint, timeout: float
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """Open a connection within *timeout* or raise ``asyncio.TimeoutError``.

        A connection that completes while the attempt is being cancelled is
        closed here, since the caller never sees it.
        """
        attempt = asyncio.ensure_future(self._connector(endpoint.host, endpoint.port))
        try:
            done, _ = await asyncio.wait({attempt}, timeout=timeout)
        except asyncio.CancelledError:
            attempt.cancel()
            raise

        if done:
            return attempt.result()

        attempt.cancel()
        await asyncio.wait({attempt})
        if not attempt.cancelled() and attempt.exception() is None:
            _reader, writer = attempt.result()
            await _close_writer(writer)
        raise asyncio.TimeoutError()

    # ------------------------------------------------------------------
    # Batch probe
    # ------------------------------------------------------------------

    async def probe_all(self, endpoints: Sequence[Endpoint]) -> list[ProbeResult]:
        """Probe every endpoint and return results in input order."""
        endpoints = list(endpoints)
        if not endpoints:
            return []

        slots: list[ProbeResult | None] = [None] * len(endpoints)
        queue: asyncio.Queue[tuple[int, Endpoint]] = asyncio.Queue()
        for item in enumerate(endpoints):
            queue.put_nowait(item)

        worker_count = min(self._max_concurrency, len(endpoints))
        logger.info(
            "Probing %d KMS servers with %d workers (timeout=%.1fs)",
            len(endpoints),
            worker_count,
            self._timeout_seconds,
            extra={"candidate_count": len(endpoints)},
        )

        workers = [
            asyncio.create_task(self._worker_loop(i, queue, slots), name=f"probe-worker-{i}")
            for i in range(worker_count)
        ]
        await asyncio.gather(*workers)

        results = [slot for slot in slots if slot is not None]
        if len(results) != len(endpoints):
            raise RuntimeError("probe workers finished with unfilled result slots")
        return results

    async def _worker_loop(
        self,
        worker_id: int,
        queue: asyncio.Queue[tuple[int, Endpoint]],
        slots: list[ProbeResult | None],
    ) -> None:
        """Worker coroutine: pull work items until the queue is empty."""
        while True:
            try:
                index, endpoint = queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            slots[index] = await self.probe(endpoint)
        logger.debug("Probe worker %d stopped", worker_id)

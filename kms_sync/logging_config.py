"""Structured JSON logging configuration.

Configures Python logging to emit one JSON object per entry with the fields
timestamp, level, logger and message. Sync-specific fields are added
contextually through ``extra``: endpoint, reachable, error_kind, latency_ms
for probes; candidate_count, source for extraction; record_name,
record_type, record_id, status_code for publishing.

SECURITY: Never logs API tokens. Token-like values in messages are redacted.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

# Patterns that should be redacted from log output
_SENSITIVE_PATTERNS = re.compile(
    r"(api.token|api.key|secret|password|token|credential|authorization)"
    r"\s*[=:]\s*(?:bearer\s+)?\S+"
    r"|bearer\s+\S+",
    re.IGNORECASE,
)

_CONTEXT_FIELDS = (
    "endpoint",
    "reachable",
    "error_kind",
    "latency_ms",
    "candidate_count",
    "source",
    "record_name",
    "record_type",
    "record_id",
    "status_code",
)


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON with structured fields.

    Each entry contains at minimum: timestamp, level, logger, message.
    Additional fields can be attached via the ``extra`` dict on log calls.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._sanitize(record.getMessage()),
        }

        for name in _CONTEXT_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)

        if hasattr(record, "error_reason"):
            entry["error_reason"] = self._sanitize(str(getattr(record, "error_reason")))

        # Exception info
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self._sanitize(self.formatException(record.exc_info))

        return json.dumps(entry, default=str, ensure_ascii=False)

    @staticmethod
    def _sanitize(text: str) -> str:
        """Remove sensitive values from log text."""
        return _SENSITIVE_PATTERNS.sub("[REDACTED]", text)


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with JSON formatting.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    # httpx logs full request URLs at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

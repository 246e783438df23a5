"""Ordered pattern rules for pulling ``host[:port]`` tokens out of free text.

Rules are applied in table order and every pattern exposes a ``host`` group
and an optional ``port`` group. When ``port`` is absent the rule's
``default_port`` is used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from kms_sync.models.endpoint import DEFAULT_KMS_PORT

_DOMAIN = r"[a-z0-9][a-z0-9.-]*\.[a-z0-9]+"
# Only start a domain at the beginning of a host-like run, never inside one.
_RUN_START = r"(?<![\w.-])[.-]*"
_PORT = r"(?::(?P<port>\d+))?"


@dataclass(frozen=True)
class ExtractionRule:
    """A single named extraction pattern."""

    name: str
    pattern: re.Pattern[str]
    default_port: int = DEFAULT_KMS_PORT

    def find(self, text: str) -> list[tuple[str, int]]:
        """Return ``(host, port)`` pairs for every match in *text*.

        Matches whose port has more than five digits are dropped; finer
        range checking is left to ``Endpoint`` validation.
        """
        pairs: list[tuple[str, int]] = []
        for match in self.pattern.finditer(text):
            port = match.group("port")
            if port is None:
                pairs.append((match.group("host"), self.default_port))
            elif len(port) <= 5:
                pairs.append((match.group("host"), int(port)))
        return pairs


DEFAULT_RULES: tuple[ExtractionRule, ...] = (
    # "kms: host" / "KMS : host:port"
    ExtractionRule(
        name="label",
        pattern=re.compile(r"\bkms\s*:\s*(?P<host>[a-z0-9.-]+)" + _PORT, re.IGNORECASE),
    ),
    # bare domain names, optionally with a port
    ExtractionRule(
        name="domain",
        pattern=re.compile(_RUN_START + r"(?P<host>" + _DOMAIN + r")" + _PORT + r"\b", re.IGNORECASE),
    ),
    # dotted-quad IPv4 literals, optionally with a port
    ExtractionRule(
        name="ipv4",
        pattern=re.compile(r"\b(?P<host>\d{1,3}(?:\.\d{1,3}){3})" + _PORT + r"\b"),
    ),
    # "server ..." / "服务器 ..." followed by a domain on the same line
    ExtractionRule(
        name="keyword",
        pattern=re.compile(
            r"(?:服务器|server)[^\w\r\n]*(?P<host>" + _DOMAIN + r")" + _PORT,
            re.IGNORECASE,
        ),
    ),
)

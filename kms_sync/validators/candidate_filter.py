"""Heuristic filter for extracted KMS server candidates.

Free-form issue text is full of incidental host-like tokens: links to code
hosting sites, placeholder domains, loopback addresses and asset file names.
``is_likely_candidate`` drops those and keeps hosts that look like KMS
servers.
"""

from __future__ import annotations

import ipaddress
import re

from kms_sync.models.endpoint import Endpoint

# Hosts matching any of these are incidental matches, never KMS servers.
_DENYLIST_PATTERNS = [
    re.compile(r"(?:^|\.)github\.com$"),
    re.compile(r"(?:^|\.)githubusercontent\.com$"),
    re.compile(r"(?:^|\.)github\.io$"),
    re.compile(r"(?:^|\.)gitlab\.com$"),
    re.compile(r"(?:^|\.)gitee\.com$"),
    re.compile(r"(?:^|\.)bitbucket\.org$"),
    re.compile(r"(?:^|\.)example\.(?:com|net|org)$"),
    re.compile(r"(?:^|\.)test\."),
    re.compile(r"(?:^|\.)localhost$"),
    re.compile(r"\.(?:js|css|html?|png|jpe?g|gif|svg|ico|webp|json)$"),
]

_ALLOWLIST_KEYWORDS = ("kms", "vlmcs", "activate")


def is_loopback(host: str) -> bool:
    """Check if *host* is a loopback or unspecified IPv4 literal."""
    try:
        addr = ipaddress.IPv4Address(host)
    except ValueError:
        return False
    return addr.is_loopback or addr.is_unspecified


def is_denylisted(host: str) -> bool:
    """True if *host* matches a known incidental-match pattern."""
    host = host.lower()
    if is_loopback(host):
        return True
    return any(pattern.search(host) for pattern in _DENYLIST_PATTERNS)


def is_likely_candidate(endpoint: Endpoint) -> bool:
    """Decide whether an extracted endpoint is worth probing.

    Order: denylist rejects, then keyword or IPv4 literal accepts, then any
    remaining dotted domain name is accepted.
    """
    host = endpoint.host
    if is_denylisted(host):
        return False
    if endpoint.is_ipv4:
        return True
    if any(keyword in host for keyword in _ALLOWLIST_KEYWORDS):
        return True
    return "." in host

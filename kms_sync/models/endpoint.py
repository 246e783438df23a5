"""Endpoint value type and the ordered candidate set built from it.

An ``Endpoint`` is identified by its normalized ``host:port`` key. Hosts are
lower-cased and stripped of surrounding dots/hyphens before validation, so
``KMS8.MSGuides.com.`` and ``kms8.msguides.com`` compare equal.
"""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_KMS_PORT = 1688

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
_DOTTED_QUAD_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")


def normalize_host(host: str) -> str:
    """Lower-case *host* and drop leading/trailing dots and hyphens."""
    return host.strip().strip(".-").lower()


def is_dotted_quad(host: str) -> bool:
    """True when *host* is a valid dotted-quad IPv4 literal."""
    if not _DOTTED_QUAD_RE.match(host):
        return False
    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        return False
    return True


def _is_dns_name(host: str) -> bool:
    if len(host) > 253:
        return False
    labels = host.split(".")
    if not all(_LABEL_RE.match(label) for label in labels):
        return False
    # A purely numeric last label is never a TLD (rules out "1.2.3").
    return not labels[-1].isdigit()


class Endpoint(BaseModel):
    """A candidate KMS server address."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_KMS_PORT, ge=1, le=65535)

    @field_validator("host", mode="before")
    @classmethod
    def _normalize_host(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_host(value)
        return value

    @field_validator("host")
    @classmethod
    def _validate_host(cls, value: str) -> str:
        if _DOTTED_QUAD_RE.match(value):
            if not is_dotted_quad(value):
                raise ValueError(f"invalid IPv4 literal: {value!r}")
            return value
        if not _is_dns_name(value):
            raise ValueError(f"invalid host name: {value!r}")
        return value

    @classmethod
    def parse(cls, text: str, default_port: int = DEFAULT_KMS_PORT) -> Endpoint:
        """Build an endpoint from ``host`` or ``host:port`` text.

        Raises
        ------
        pydantic.ValidationError
            If the host or port is not valid.
        ValueError
            If the port part is not an integer.
        """
        host, sep, port = text.strip().rpartition(":")
        if not sep:
            return cls(host=port, port=default_port)
        return cls(host=host, port=int(port))

    @property
    def key(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_ipv4(self) -> bool:
        return is_dotted_quad(self.host)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Endpoint):
            return self.key == other.key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key


class CandidateSet:
    """Insertion-ordered set of endpoints keyed by ``host:port``.

    ``add`` never replaces an existing entry, so the first rule that produced
    a key keeps it. ``from_fallback`` marks the static fallback list.
    """

    def __init__(
        self,
        endpoints: Iterable[Endpoint] = (),
        *,
        from_fallback: bool = False,
    ) -> None:
        self._items: dict[str, Endpoint] = {}
        self.from_fallback = from_fallback
        for endpoint in endpoints:
            self.add(endpoint)

    def add(self, endpoint: Endpoint) -> bool:
        """Add *endpoint*; return False if its key was already present."""
        if endpoint.key in self._items:
            return False
        self._items[endpoint.key] = endpoint
        return True

    def keys(self) -> set[str]:
        return set(self._items)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Endpoint):
            return item.key in self._items
        if isinstance(item, str):
            return item.lower() in self._items
        return False

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        keys = ", ".join(self._items)
        return f"CandidateSet([{keys}], from_fallback={self.from_fallback})"

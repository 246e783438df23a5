"""Static fallback list of known KMS servers.

Used whenever the source text cannot be fetched or yields no candidates, so
a run always has something to probe.
"""

from __future__ import annotations

from kms_sync.models.endpoint import Endpoint

FALLBACK_SERVERS: tuple[str, ...] = (
    "kms.hmg.pw:1688",
    "kms.xingez.me:1688",
    "140.246.142.164:1688",
    "kms.03k.org:1688",
    "kms.chinancce.com:1688",
    "kms.ddns.net:1688",
    "kms.ddz.red:1688",
    "kms.lotro.cc:1688",
    "kms.luody.info:1688",
    "kms.moeclub.org:1688",
    "kms8.msguides.com:1688",
    "xykz.f3322.org:1688",
    "kms.cangshui.net:1688",
)

FALLBACK_ENDPOINTS: tuple[Endpoint, ...] = tuple(Endpoint.parse(s) for s in FALLBACK_SERVERS)

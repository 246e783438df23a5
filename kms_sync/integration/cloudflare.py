"""Cloudflare DNS publisher.

Implements the find-then-edit-or-create upsert against the Cloudflare v4 API:
``GET /zones/:zone/dns_records?name=`` to look the record up, then ``PUT``
on the existing id or ``POST`` a new record. Records are never proxied.

SECURITY: The API token is only sent in the Authorization header, never logged.
"""

from __future__ import annotations

import logging

import httpx

from kms_sync.errors import PublishError
from kms_sync.integration.base import DnsPublisher, RecordType

logger = logging.getLogger(__name__)


class CloudflareDnsClient(DnsPublisher):
    """HTTP client for Cloudflare DNS record upserts.

    Parameters
    ----------
    api_token:
        Cloudflare API token with DNS edit permission for the zone.
    zone_id:
        Identifier of the zone that owns the record.
    api_url:
        Cloudflare API base URL.
    timeout_seconds:
        HTTP timeout per request (default 10).
    """

    def __init__(
        self,
        api_token: str,
        zone_id: str,
        api_url: str = "https://api.cloudflare.com/client/v4",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._api_token = api_token
        self._zone_id = zone_id
        self._records_url = f"{api_url.rstrip('/')}/zones/{zone_id}/dns_records"
        self._timeout_seconds = timeout_seconds

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
        }

    async def upsert(
        self,
        record_name: str,
        record_type: RecordType,
        content: str,
        ttl: int,
    ) -> str:
        """Create or update *record_name* and return its record id.

        Raises
        ------
        PublishError
            If any Cloudflare call fails at the transport level, returns a
            non-2xx status, or reports ``success: false``.
        """
        payload = {
            "type": record_type,
            "name": record_name,
            "content": content,
            "ttl": ttl,
            "proxied": False,
        }
        logger.info(
            "Updating Cloudflare DNS record %s to point to %s (%s)",
            record_name,
            content,
            record_type,
            extra={"record_name": record_name, "record_type": record_type},
        )

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            record_id = await self.find_record_id(client, record_name)

            if record_id is None:
                logger.info("DNS record not found, creating new record")
                data = await self._request(client, "POST", self._records_url, json=payload)
                action = "Created"
            else:
                logger.info("Updating existing DNS record with ID: %s", record_id)
                data = await self._request(
                    client, "PUT", f"{self._records_url}/{record_id}", json=payload
                )
                action = "Updated"

        result_id = str((data.get("result") or {}).get("id") or record_id or "")
        if not result_id:
            raise PublishError("Cloudflare response did not include a record id")

        logger.info(
            "%s DNS record %s with ID: %s",
            action,
            record_name,
            result_id,
            extra={"record_name": record_name, "record_type": record_type, "record_id": result_id},
        )
        return result_id

    async def find_record_id(self, client: httpx.AsyncClient, record_name: str) -> str | None:
        """Return the id of the first record named *record_name*, or None."""
        data = await self._request(
            client, "GET", self._records_url, params={"name": record_name}
        )
        records = data.get("result") or []
        if not records or not records[0].get("id"):
            return None
        return str(records[0]["id"])

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        **kwargs: object,
    ) -> dict:
        """Send one API request and unwrap the Cloudflare envelope."""
        try:
            response = await client.request(method, url, headers=self._headers(), **kwargs)  # type: ignore[arg-type]
        except httpx.TransportError as exc:
            raise PublishError(f"Cloudflare {method} request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error or data.get("success") is False:
            errors = data.get("errors") or []
            logger.error(
                "Cloudflare %s %s failed: %d %s %s",
                method,
                url,
                response.status_code,
                response.reason_phrase,
                errors,
                extra={"status_code": response.status_code},
            )
            raise PublishError(
                f"Cloudflare {method} failed: {response.status_code} "
                f"{response.reason_phrase} - {errors}",
                status_code=response.status_code,
                errors=errors,
            )
        return data

"""GitHub issue client that supplies the source text for extraction.

Fetches ``GET /repos/:owner/:repo/issues/:number`` from the GitHub REST API
and returns the issue body. Redirects are followed. Any other httpx error
(connection, timeout, 5xx, undecodable body, redirect loop) is retried with
exponential backoff and ends in ``SourceFetchError``; 4xx responses (bad
token, missing issue, rate limit) fail immediately.

SECURITY: Never logs the GitHub token.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from kms_sync.errors import SourceFetchError
from kms_sync.integration.base import SourceTextProvider

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 200


class IssueSourceClient(SourceTextProvider):
    """HTTP client for the GitHub issue that lists KMS servers.

    Parameters
    ----------
    owner, repo, issue_number:
        Location of the issue.
    token:
        Optional GitHub token, sent as ``Authorization: token ...``.
    api_url:
        GitHub API base URL.
    timeout_seconds:
        HTTP timeout per attempt (default 10).
    max_retries:
        Maximum attempts on transient failures (default 3).
    backoff_base:
        Base backoff in seconds (default 1). Schedule: 1s, 2s, 4s.
    transport:
        Optional httpx transport for the underlying client.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        timeout_seconds: float = 10.0,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}/issues/{issue_number}"
        self._token = token
        self._timeout_seconds = timeout_seconds
        self._max_retries = max(1, max_retries)
        self._backoff_base = backoff_base
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "KMS-Server-Sync-Script",
        }
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        return headers

    async def fetch_source_text(self) -> str:
        """Fetch the issue body, retrying transient failures.

        Raises
        ------
        SourceFetchError
            On a 4xx response, an unparseable payload, or when all retry
            attempts fail.
        """
        logger.info("Fetching KMS servers from GitHub API: %s", self._url)
        if self._token:
            logger.info("Using GitHub token for authentication")

        last_exception: Exception | None = None

        for attempt in range(self._max_retries):
            try:
                # Renamed or transferred repos answer with 301 to the new location
                async with httpx.AsyncClient(
                    transport=self._transport,
                    follow_redirects=True,
                ) as client:
                    response = await client.get(
                        self._url,
                        headers=self._headers(),
                        timeout=self._timeout_seconds,
                    )

                logger.info(
                    "Response status: %d %s",
                    response.status_code,
                    response.reason_phrase,
                    extra={"status_code": response.status_code},
                )

                if 400 <= response.status_code < 500:
                    raise SourceFetchError(
                        f"Failed to fetch issue: {response.status_code} {response.reason_phrase}",
                        status_code=response.status_code,
                    )

                response.raise_for_status()
                return self._parse_body(response)

            except SourceFetchError:
                raise

            except httpx.HTTPError as exc:
                last_exception = exc
                backoff = self._backoff_base * (2**attempt)
                logger.warning(
                    "GitHub issue fetch failed (attempt %d/%d): %s, retrying in %.0fs",
                    attempt + 1,
                    self._max_retries,
                    exc,
                    backoff,
                )
                if attempt < self._max_retries - 1:
                    await asyncio.sleep(backoff)

        logger.error("Failed to fetch issue after %d attempts", self._max_retries)
        raise SourceFetchError(
            f"Failed to fetch issue {self._url} after {self._max_retries} attempts: {last_exception}",
        ) from last_exception

    @staticmethod
    def _parse_body(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError as exc:
            raise SourceFetchError("GitHub API returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise SourceFetchError("GitHub API returned an unexpected payload")

        body = data.get("body") or ""
        logger.info("Issue title: %s", data.get("title"))
        logger.info("Issue body length: %d characters", len(body))
        logger.debug("Issue body preview: %s...", body[:_PREVIEW_CHARS])
        return body

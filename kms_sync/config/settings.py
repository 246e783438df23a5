"""Pydantic Settings for the KMS sync job.

Variable names match the deployment environment, without a prefix.
Example: CLOUDFLARE_API_TOKEN=..., CLOUDFLARE_ZONE_ID=..., DNS_RECORD_NAME=kms.example.org
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncSettings(BaseSettings):
    """Sync job configuration validated from environment variables."""

    # Cloudflare
    cloudflare_api_token: str = Field(min_length=1)
    cloudflare_zone_id: str = Field(min_length=1)
    cloudflare_api_url: str = "https://api.cloudflare.com/client/v4"
    dns_record_name: str = Field(min_length=1)
    dns_ttl: int = Field(default=120, ge=1, le=86400)  # 1 = automatic

    # Source issue
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"
    issue_owner: str = "iougemini"
    issue_repo: str = "iougemini.github.io"
    issue_number: int = Field(default=1, ge=1)
    source_max_retries: int = Field(default=3, ge=1)
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Probing
    probe_timeout_seconds: float = Field(default=5.0, gt=0, le=60)
    probe_concurrency: int = Field(default=8, ge=1, le=16)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("dns_ttl")
    @classmethod
    def _check_ttl(cls, value: int) -> int:
        if value != 1 and value < 60:
            raise ValueError("dns_ttl must be 1 (automatic) or between 60 and 86400")
        return value

    @field_validator("github_token")
    @classmethod
    def _empty_token_is_none(cls, value: str | None) -> str | None:
        return value or None

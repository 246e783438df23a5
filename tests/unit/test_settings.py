"""Unit tests for SyncSettings."""

import pytest
from pydantic import ValidationError

from kms_sync.config.settings import SyncSettings


class TestSyncSettings:
    def test_loads_required_env_vars(self):
        settings = SyncSettings(_env_file=None)

        assert settings.cloudflare_api_token == "test-cf-token"
        assert settings.cloudflare_zone_id == "zone-123"
        assert settings.dns_record_name == "kms.example.org"

    def test_defaults_are_correct(self):
        settings = SyncSettings(_env_file=None)

        assert settings.github_token is None
        assert settings.probe_timeout_seconds == 5.0
        assert settings.probe_concurrency == 8
        assert settings.dns_ttl == 120
        assert settings.issue_owner == "iougemini"
        assert settings.issue_repo == "iougemini.github.io"
        assert settings.issue_number == 1
        assert settings.github_api_url == "https://api.github.com"
        assert settings.cloudflare_api_url == "https://api.cloudflare.com/client/v4"
        assert settings.http_timeout_seconds == 10.0
        assert settings.source_max_retries == 3
        assert settings.log_level == "INFO"

    @pytest.mark.parametrize(
        "missing", ["CLOUDFLARE_API_TOKEN", "CLOUDFLARE_ZONE_ID", "DNS_RECORD_NAME"]
    )
    def test_missing_required_raises(self, monkeypatch: pytest.MonkeyPatch, missing: str):
        monkeypatch.delenv(missing)

        with pytest.raises(ValidationError) as exc_info:
            SyncSettings(_env_file=None)

        assert exc_info.value.errors()[0]["loc"] == (missing.lower(),)

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
        monkeypatch.setenv("PROBE_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("PROBE_CONCURRENCY", "16")
        monkeypatch.setenv("ISSUE_NUMBER", "7")

        settings = SyncSettings(_env_file=None)

        assert settings.github_token == "gh-token"
        assert settings.probe_timeout_seconds == 2.5
        assert settings.probe_concurrency == 16
        assert settings.issue_number == 7

    def test_empty_github_token_is_none(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GITHUB_TOKEN", "")
        assert SyncSettings(_env_file=None).github_token is None

    @pytest.mark.parametrize("ttl", [1, 60, 120, 86400])
    def test_valid_ttl(self, monkeypatch: pytest.MonkeyPatch, ttl: int):
        monkeypatch.setenv("DNS_TTL", str(ttl))
        assert SyncSettings(_env_file=None).dns_ttl == ttl

    @pytest.mark.parametrize("ttl", [0, 2, 59, 86401])
    def test_invalid_ttl(self, monkeypatch: pytest.MonkeyPatch, ttl: int):
        monkeypatch.setenv("DNS_TTL", str(ttl))
        with pytest.raises(ValidationError):
            SyncSettings(_env_file=None)

    @pytest.mark.parametrize("value", ["0", "17"])
    def test_probe_concurrency_bounds(self, monkeypatch: pytest.MonkeyPatch, value: str):
        monkeypatch.setenv("PROBE_CONCURRENCY", value)
        with pytest.raises(ValidationError):
            SyncSettings(_env_file=None)

    def test_probe_timeout_must_be_positive(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PROBE_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            SyncSettings(_env_file=None)

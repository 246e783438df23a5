"""Unit tests for the command-line entry point."""

from __future__ import annotations

import json
import logging
from unittest.mock import AsyncMock, patch

import pytest

from kms_sync.errors import ConfigurationError, NoReachableEndpointError, PublishError
from kms_sync.main import load_settings, main
from kms_sync.models.endpoint import Endpoint
from kms_sync.models.report import SyncReport


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _report() -> SyncReport:
    selected = Endpoint(host="kms.hmg.pw")
    return SyncReport(
        source="issue",
        candidates=[selected],
        selected=selected,
        record_type="CNAME",
        record_id="rec-123",
    )


class TestLoadSettings:
    def test_missing_variable_raises_configuration_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("CLOUDFLARE_ZONE_ID")

        with pytest.raises(ConfigurationError, match="CLOUDFLARE_ZONE_ID"):
            load_settings()

    def test_invalid_values_are_not_echoed(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PROBE_CONCURRENCY", "sekrit-999")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        assert "PROBE_CONCURRENCY" in exc_info.value.message
        assert "sekrit-999" not in exc_info.value.message


class TestMain:
    def test_success_returns_zero(self, capsys: pytest.CaptureFixture[str]):
        with patch("kms_sync.main.run", new_callable=AsyncMock, return_value=_report()):
            assert main() == 0

        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
        assert any("kms.hmg.pw:1688" in line["message"] for line in lines)

    def test_no_reachable_endpoint_exits_2(self):
        error = NoReachableEndpointError(candidate_count=3)
        with patch("kms_sync.main.run", new_callable=AsyncMock, side_effect=error):
            assert main() == 2

    def test_publish_error_exits_3(self, capsys: pytest.CaptureFixture[str]):
        error = PublishError("Cloudflare PUT failed: 400 Bad Request - []")
        with patch("kms_sync.main.run", new_callable=AsyncMock, side_effect=error):
            assert main() == 3

        assert "Cloudflare PUT failed: 400 Bad Request" in capsys.readouterr().err

    def test_unexpected_error_exits_1(self):
        with patch("kms_sync.main.run", new_callable=AsyncMock, side_effect=RuntimeError("boom")):
            assert main() == 1

    def test_configuration_error_exits_1_without_running(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ):
        monkeypatch.delenv("CLOUDFLARE_API_TOKEN")

        with patch("kms_sync.main.run", new_callable=AsyncMock) as mock_run:
            assert main() == 1

        mock_run.assert_not_called()
        assert "CLOUDFLARE_API_TOKEN" in capsys.readouterr().err

    def test_token_never_logged(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]):
        monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "cf-very-secret")
        error = PublishError("Cloudflare POST failed: 403 Forbidden - []")

        with patch("kms_sync.main.run", new_callable=AsyncMock, side_effect=error):
            main()

        assert "cf-very-secret" not in capsys.readouterr().err

"""Unit tests for the error hierarchy."""

import pytest

from kms_sync.errors import (
    ConfigurationError,
    ExtractionEmptyError,
    KmsSyncError,
    NoReachableEndpointError,
    PublishError,
    SourceFetchError,
)


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        ("cls", "exit_code"),
        [
            (ConfigurationError, 1),
            (SourceFetchError, 1),
            (ExtractionEmptyError, 1),
            (NoReachableEndpointError, 2),
            (PublishError, 3),
        ],
    )
    def test_exit_codes(self, cls, exit_code):
        err = cls()
        assert isinstance(err, KmsSyncError)
        assert err.exit_code == exit_code

    def test_default_message(self):
        assert PublishError().message == "Failed to publish DNS record"
        assert str(NoReachableEndpointError()) == "No reachable KMS endpoint found"

    def test_custom_message_and_details(self):
        err = SourceFetchError("Failed to fetch issue: 403 Forbidden", status_code=403)
        assert err.message == "Failed to fetch issue: 403 Forbidden"
        assert str(err) == err.message
        assert err.details == {"status_code": 403}

    def test_details_default_empty(self):
        assert ConfigurationError().details == {}

"""
Tests for centralized error classification.
"""

import pytest

from storage_sync.domain.storage.entities import GamePlatform
from storage_sync.domain.storage.errors import (
    AuthenticationExpired,
    CredentialUnavailable,
    NetworkUnreachable,
    ProtocolViolation,
    RemoteReportedFailure,
    StorageSyncError,
    Timeout,
    UnknownTagFallback,
)
from storage_sync.shared.errors import ErrorCategory, RecoveryAction, classify_error


class TestClassifyError:
    """Error to category, action and user-safe message."""

    @pytest.mark.parametrize(
        ("error", "category", "action", "retryable"),
        [
            (Timeout("/v1/analytics", 30), ErrorCategory.TIMEOUT, RecoveryAction.RETRY, True),
            (
                NetworkUnreachable("/v1/analytics", "dns"),
                ErrorCategory.NETWORK,
                RecoveryAction.RETRY,
                True,
            ),
            (
                AuthenticationExpired("/v1/analytics"),
                ErrorCategory.AUTHENTICATION,
                RecoveryAction.REAUTHENTICATE,
                False,
            ),
            (
                CredentialUnavailable(),
                ErrorCategory.CREDENTIAL,
                RecoveryAction.REAUTHENTICATE,
                False,
            ),
            (
                RemoteReportedFailure("db down", 503),
                ErrorCategory.REMOTE,
                RecoveryAction.RETRY,
                True,
            ),
            (
                RemoteReportedFailure("not found", 404),
                ErrorCategory.REMOTE,
                RecoveryAction.REPORT,
                False,
            ),
            (
                RemoteReportedFailure("quota"),
                ErrorCategory.REMOTE,
                RecoveryAction.REPORT,
                False,
            ),
            (
                ProtocolViolation("missing data"),
                ErrorCategory.PROTOCOL,
                RecoveryAction.REPORT,
                False,
            ),
            (
                UnknownTagFallback("platform", "x", GamePlatform.STEAM),
                ErrorCategory.DATA_QUALITY,
                RecoveryAction.NONE,
                False,
            ),
        ],
    )
    def test_known_errors(self, error, category, action, retryable):
        classification = classify_error(error)
        assert classification.category is category
        assert classification.action is action
        assert classification.retryable is retryable

    def test_unknown_errors_are_unexpected(self):
        assert classify_error(KeyError("x")).category is ErrorCategory.UNEXPECTED
        assert classify_error(StorageSyncError("odd")).action is RecoveryAction.REPORT

    def test_message_hides_internal_details(self):
        classification = classify_error(
            NetworkUnreachable("/v1/locations/physical/secret-id", "refused")
        )
        assert "secret-id" not in classification.message
        assert "/v1" not in classification.message

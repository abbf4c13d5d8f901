"""
Centralized error classification.

Maps sync-layer errors to a stable category, a recovery action and a
user-safe message so that UI collaborators can decide what to show and
what to do next. No internal details (endpoints, tokens, payloads) are
ever placed in the user-facing message.
"""

import logging
from dataclasses import dataclass
from enum import Enum

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

logger = logging.getLogger(__name__)

HTTP_500 = 500


class ErrorCategory(Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    PROTOCOL = "protocol"
    REMOTE = "remote"
    AUTHENTICATION = "authentication"
    CREDENTIAL = "credential"
    DATA_QUALITY = "data_quality"
    UNEXPECTED = "unexpected"


class RecoveryAction(Enum):
    RETRY = "retry"
    REAUTHENTICATE = "reauthenticate"
    REPORT = "report"
    NONE = "none"


@dataclass(frozen=True)
class ErrorClassification:
    """How a caller should present and recover from an error.

    Attributes:
        category: Stable error category.
        action: Suggested recovery action.
        message: Message safe to show to an end user.
        retryable: Whether repeating the same operation may succeed.
    """

    category: ErrorCategory
    action: RecoveryAction
    message: str
    retryable: bool = False


def classify_error(exc: BaseException) -> ErrorClassification:
    """Classify an exception raised by the sync layer.

    Args:
        exc: Any exception. Unknown types map to the unexpected category.

    Returns:
        The ErrorClassification for ``exc``.
    """
    if isinstance(exc, Timeout):
        logger.warning("Request timed out: %s", exc.endpoint)
        return ErrorClassification(
            ErrorCategory.TIMEOUT,
            RecoveryAction.RETRY,
            "The server took too long to respond. Please try again.",
            retryable=True,
        )

    if isinstance(exc, NetworkUnreachable):
        logger.warning("Network unreachable: %s", exc.endpoint)
        return ErrorClassification(
            ErrorCategory.NETWORK,
            RecoveryAction.RETRY,
            "Unable to reach the server. Check your connection and try again.",
            retryable=True,
        )

    if isinstance(exc, AuthenticationExpired):
        logger.warning("Authentication expired: %s", exc.endpoint)
        return ErrorClassification(
            ErrorCategory.AUTHENTICATION,
            RecoveryAction.REAUTHENTICATE,
            "Your session has expired. Please sign in again.",
        )

    if isinstance(exc, CredentialUnavailable):
        logger.warning("Credential unavailable")
        return ErrorClassification(
            ErrorCategory.CREDENTIAL,
            RecoveryAction.REAUTHENTICATE,
            "You are not signed in. Please sign in to continue.",
        )

    if isinstance(exc, RemoteReportedFailure):
        server_side = exc.status_code is not None and exc.status_code >= HTTP_500
        logger.warning("Remote failure (status=%s)", exc.status_code)
        return ErrorClassification(
            ErrorCategory.REMOTE,
            RecoveryAction.RETRY if server_side else RecoveryAction.REPORT,
            "The server could not complete the request.",
            retryable=server_side,
        )

    if isinstance(exc, ProtocolViolation):
        logger.error("Protocol violation: %s", exc.reason)
        return ErrorClassification(
            ErrorCategory.PROTOCOL,
            RecoveryAction.REPORT,
            "The server sent an unexpected response.",
        )

    if isinstance(exc, UnknownTagFallback):
        return ErrorClassification(
            ErrorCategory.DATA_QUALITY,
            RecoveryAction.NONE,
            "Some values were shown with defaults.",
        )

    if isinstance(exc, StorageSyncError):
        logger.error("Unhandled storage sync error: %s", exc.message)
    else:
        logger.error("Unexpected error: %s", type(exc).__name__)
    return ErrorClassification(
        ErrorCategory.UNEXPECTED,
        RecoveryAction.REPORT,
        "Something went wrong. Please try again later.",
    )

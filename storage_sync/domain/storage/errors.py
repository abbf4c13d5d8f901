"""
Domain-specific errors for the storage bounded context.

All errors raised by the sync layer must be defined here.
They are mapped to recovery actions by shared.errors.classification.
No framework imports allowed.
"""

from typing import Any


class StorageSyncError(Exception):
    """Base error for all storage sync errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class Timeout(StorageSyncError):
    """Raised when a request exceeds its fixed timeout. Never retried here."""

    def __init__(self, endpoint: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Request to {endpoint} timed out after {timeout_seconds:g}s"
        )
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds


class NetworkUnreachable(StorageSyncError):
    """Raised when the backend cannot be reached at all."""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"Network unreachable for {endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class ProtocolViolation(StorageSyncError):
    """Raised when a response body breaks the envelope contract."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"Protocol violation: {reason}")
        self.reason = reason
        self.status_code = status_code


class RemoteReportedFailure(StorageSyncError):
    """Raised when the backend answers with ``success: false`` or a terminal status."""

    def __init__(self, error: str, status_code: int | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.status_code = status_code


class AuthenticationExpired(StorageSyncError):
    """Raised when a request is still unauthorized after its one retry."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(f"Authentication expired for {endpoint}")
        self.endpoint = endpoint


class CredentialUnavailable(StorageSyncError):
    """Raised by the identity collaborator when no credential can be issued."""

    def __init__(self, reason: str = "credential unavailable") -> None:
        super().__init__(reason)
        self.reason = reason


class UnknownTagFallback(StorageSyncError):
    """Non-fatal: an adapter substituted a default tag for unknown server data.

    Never raised out of the adapters. Instances are handed to telemetry only.
    """

    def __init__(self, field: str, raw_value: Any, fallback: Any) -> None:
        super().__init__(
            f"Unknown {field} {raw_value!r}, using {fallback!r}"
        )
        self.field = field
        self.raw_value = raw_value
        self.fallback = fallback

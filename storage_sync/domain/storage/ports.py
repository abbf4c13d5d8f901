"""
Port interfaces (ABCs) for the storage bounded context.

Ports define the contracts that the sync layer requires from the outside world.
Infrastructure adapters (or the host application) implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class IdentityProvider(ABC):
    """Port for obtaining bearer credentials from the identity collaborator.

    The provider owns the credential cache. The sync layer only reads and
    asks for refreshes; it performs no locking of its own.
    """

    @abstractmethod
    async def get_credential(self) -> str:
        """Return the current bearer token.

        Raises:
            CredentialUnavailable: If no credential can be issued.
        """
        raise NotImplementedError

    @abstractmethod
    async def refresh_credential(self) -> str:
        """Force a new bearer token and return it.

        Raises:
            CredentialUnavailable: If the refresh fails.
        """
        raise NotImplementedError


class ObservabilitySink(ABC):
    """Port for fire-and-forget telemetry events.

    Implementations must not raise. Callers never rely on these calls
    for correctness.
    """

    @abstractmethod
    def record_request_error(
        self,
        error: Exception,
        *,
        endpoint: str,
        method: str,
        status_code: Optional[int] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        """Record a failed request."""
        raise NotImplementedError

    @abstractmethod
    def record_auth_error(
        self,
        error: Exception,
        *,
        endpoint: str,
        method: str,
        status_code: Optional[int] = None,
    ) -> None:
        """Record an authentication failure (refresh failed or 401 after retry)."""
        raise NotImplementedError

    @abstractmethod
    def record_breadcrumb(
        self,
        message: str,
        *,
        category: str = "api",
        data: Optional[dict[str, Any]] = None,
    ) -> None:
        """Record an informational event on the timeline."""
        raise NotImplementedError

    @abstractmethod
    def record_success(
        self,
        *,
        endpoint: str,
        method: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Record a successful request."""
        raise NotImplementedError

    @abstractmethod
    def record_slow_response(
        self,
        *,
        endpoint: str,
        method: str,
        duration_ms: float,
        threshold_ms: float,
    ) -> None:
        """Record a request that exceeded the slow-response threshold."""
        raise NotImplementedError

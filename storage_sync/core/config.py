"""
Client configuration.

Loads settings from environment variables and .env file.
Transport defaults live here and nowhere else.
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from storage_sync.domain.storage.ports import IdentityProvider, ObservabilitySink

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_SLOW_RESPONSE_MS = 5000.0


@dataclass(frozen=True)
class TransportConfig:
    """Explicit configuration handed to a TransportClient.

    Attributes:
        base_url: Backend root, e.g. ``https://api.example.com/api``.
        identity: Collaborator that issues and refreshes bearer credentials.
        sink: Fire-and-forget telemetry sink. None disables telemetry.
        timeout_seconds: Per-request timeout. Expiry raises Timeout.
        slow_response_threshold_ms: Successful calls slower than this are
            reported through ``record_slow_response``.
        default_headers: Headers sent with every request, overridable per call.
    """

    base_url: str
    identity: Optional[IdentityProvider] = None
    sink: Optional[ObservabilitySink] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    slow_response_threshold_ms: float = DEFAULT_SLOW_RESPONSE_MS
    default_headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.slow_response_threshold_ms < 0:
            raise ValueError("slow_response_threshold_ms must be non-negative")


class Settings(BaseSettings):
    """Client settings loaded from environment.

    Attributes:
        api_base_url: Root URL of the storage backend.
        request_timeout_seconds: Fixed per-request timeout.
        slow_response_threshold_ms: Threshold for slow-response telemetry.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        coordinate_credential_refresh: Share one in-flight credential refresh
            between concurrent requests instead of one refresh per request.
        user_agent: Value of the User-Agent header.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORAGE_SYNC_",
        extra="ignore",
    )

    api_base_url: str = "http://localhost:8000/api"
    request_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    slow_response_threshold_ms: float = DEFAULT_SLOW_RESPONSE_MS
    log_level: str = "INFO"
    coordinate_credential_refresh: bool = False
    user_agent: str = "storage-sync/0.1.0"

    def transport_config(
        self,
        identity: Optional[IdentityProvider] = None,
        sink: Optional[ObservabilitySink] = None,
    ) -> TransportConfig:
        """Build the TransportConfig for these settings.

        When ``coordinate_credential_refresh`` is on, the identity provider is
        wrapped so concurrent refreshes collapse into one call.
        """
        if identity is not None and self.coordinate_credential_refresh:
            from storage_sync.infrastructure.http.refresh import SingleFlightRefresher

            identity = SingleFlightRefresher(identity)

        return TransportConfig(
            base_url=self.api_base_url,
            identity=identity,
            sink=sink,
            timeout_seconds=self.request_timeout_seconds,
            slow_response_threshold_ms=self.slow_response_threshold_ms,
            default_headers={"User-Agent": self.user_agent},
        )


settings = Settings()

"""
Composition root for the storage bounded context.

Wires a TransportClient from settings and hands it to the services.
Nothing here is a module-level singleton: every call builds a new
client, and the caller closes it.
"""

from dataclasses import dataclass
from typing import Optional

from storage_sync.application.storage.digital_locations import DigitalLocationService
from storage_sync.application.storage.physical_locations import PhysicalLocationService
from storage_sync.application.storage.storage_analytics import StorageAnalyticsService
from storage_sync.core.config import Settings, settings
from storage_sync.domain.storage.ports import IdentityProvider, ObservabilitySink
from storage_sync.infrastructure.http.transport_client import TransportClient
from storage_sync.infrastructure.telemetry.logging_sink import LoggingObservabilitySink


@dataclass(frozen=True)
class StorageServices:
    """The services sharing one transport client."""

    transport: TransportClient
    physical: PhysicalLocationService
    digital: DigitalLocationService
    analytics: StorageAnalyticsService

    async def aclose(self) -> None:
        await self.transport.aclose()


def build_transport(
    identity: Optional[IdentityProvider] = None,
    sink: Optional[ObservabilitySink] = None,
    config: Optional[Settings] = None,
) -> TransportClient:
    """Build a TransportClient from settings.

    Args:
        identity: Credential collaborator. None sends unauthenticated requests.
        sink: Telemetry sink. Defaults to LoggingObservabilitySink.
        config: Settings to use instead of the module-level settings.
    """
    config = config or settings
    return TransportClient(
        config.transport_config(identity=identity, sink=sink or LoggingObservabilitySink())
    )


def build_services(
    identity: Optional[IdentityProvider] = None,
    sink: Optional[ObservabilitySink] = None,
    config: Optional[Settings] = None,
) -> StorageServices:
    """Build every storage service on one shared transport."""
    transport = build_transport(identity=identity, sink=sink, config=config)
    return StorageServices(
        transport=transport,
        physical=PhysicalLocationService(transport),
        digital=DigitalLocationService(transport),
        analytics=StorageAnalyticsService(transport),
    )

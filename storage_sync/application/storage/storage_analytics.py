"""
Use case: storage overview from the analytics endpoint.

Input: TransportClient
Output: StorageOverview
Side effects: One HTTP call; data-quality telemetry.
Failure cases: transport errors propagate unchanged.
"""

import logging
from typing import Optional

from storage_sync.application.storage.analytics_adapters import adapt_storage_overview
from storage_sync.application.storage.confirmations import unwrap_resource
from storage_sync.application.storage.dtos import StorageOverview
from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.infrastructure.http.transport_client import TransportClient

logger = logging.getLogger(__name__)

ANALYTICS_ENDPOINT = "/v1/analytics"
ANALYTICS_KEY = "analytics"
STORAGE_DOMAIN = "storage"


class StorageAnalyticsService:
    """Fetches and adapts the storage section of the analytics endpoint."""

    def __init__(
        self,
        transport: TransportClient,
        sink: Optional[ObservabilitySink] = None,
    ) -> None:
        self._transport = transport
        self._sink = sink if sink is not None else transport.config.sink

    async def fetch_overview(self) -> StorageOverview:
        data = await self._transport.get(
            ANALYTICS_ENDPOINT, params={"domains": STORAGE_DOMAIN}
        )
        overview = adapt_storage_overview(unwrap_resource(data, ANALYTICS_KEY), self._sink)
        logger.info(
            "Storage overview: %d physical, %d digital locations (recomputed=%s)",
            overview.metadata.locations.physical,
            overview.metadata.locations.digital,
            overview.metadata.recomputed,
        )
        return overview

"""
Service: digital locations.

Input: TransportClient, request schemas, ids
Output: DigitalLocation, DigitalLocationsPage, MutationResult
Side effects: HTTP calls through the transport; data-quality telemetry.
Failure cases: transport errors propagate unchanged.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from storage_sync.application.storage import query_keys
from storage_sync.application.storage.confirmations import (
    adapt_delete_result,
    unwrap_resource,
)
from storage_sync.application.storage.digital_adapters import (
    adapt_digital_locations,
    adapt_digital_locations_page,
    adapt_single_digital_location,
)
from storage_sync.application.storage.dtos import (
    DeleteResult,
    DigitalLocationsPage,
    MutationResult,
)
from storage_sync.domain.storage.entities import DigitalLocation
from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.infrastructure.http.transport_client import TransportClient
from storage_sync.interfaces.storage.schemas import (
    CreateDigitalLocationRequest,
    UpdateDigitalLocationRequest,
)

logger = logging.getLogger(__name__)

DIGITAL_ENDPOINT = "/v1/locations/digital"
DIGITAL_KEY = "digital"


class DigitalLocationService:
    """Orchestrates digital location reads and writes."""

    def __init__(
        self,
        transport: TransportClient,
        sink: Optional[ObservabilitySink] = None,
    ) -> None:
        self._transport = transport
        self._sink = sink if sink is not None else transport.config.sink

    async def fetch_page(self) -> DigitalLocationsPage:
        data = await self._transport.get(f"{DIGITAL_ENDPOINT}/bff")
        page = adapt_digital_locations_page(unwrap_resource(data, DIGITAL_KEY), self._sink)
        logger.info("Fetched %d digital locations", len(page.digital_locations))
        return page

    async def list_locations(self) -> tuple[DigitalLocation, ...]:
        data = await self._transport.get(DIGITAL_ENDPOINT)
        records = unwrap_resource(data, DIGITAL_KEY)
        if isinstance(records, dict):
            records = records.get("digitalLocations", records.get("locations"))
        return adapt_digital_locations(records, self._sink)

    async def get_location(self, location_id: str) -> DigitalLocation:
        data = await self._transport.get(f"{DIGITAL_ENDPOINT}/{location_id}")
        return adapt_single_digital_location(
            unwrap_resource(data, DIGITAL_KEY), self._sink
        )

    async def create_location(
        self, request: CreateDigitalLocationRequest
    ) -> MutationResult[DigitalLocation]:
        data = await self._transport.post(
            DIGITAL_ENDPOINT, request.model_dump(mode="json", exclude_none=True)
        )
        location = adapt_single_digital_location(
            unwrap_resource(data, DIGITAL_KEY), self._sink
        )
        logger.info("Created digital location %s", location.id)
        return MutationResult(
            value=location,
            invalidate=(query_keys.DIGITAL_ALL, query_keys.ANALYTICS),
        )

    async def update_location(
        self, location_id: str, request: UpdateDigitalLocationRequest
    ) -> MutationResult[DigitalLocation]:
        data = await self._transport.put(
            f"{DIGITAL_ENDPOINT}/{location_id}",
            request.model_dump(mode="json", exclude_none=True, exclude_unset=True),
        )
        location = adapt_single_digital_location(
            unwrap_resource(data, DIGITAL_KEY), self._sink
        )
        return MutationResult(
            value=location,
            invalidate=(
                query_keys.digital_detail(location.id),
                query_keys.DIGITAL_ALL,
                query_keys.ANALYTICS,
            ),
        )

    async def delete_locations(
        self, location_ids: Sequence[str]
    ) -> MutationResult[DeleteResult]:
        """Bulk delete digital locations.

        Raises:
            ValueError: If ``location_ids`` is empty.
        """
        if not location_ids:
            raise ValueError("at least one id is required")
        data = await self._transport.delete(
            DIGITAL_ENDPOINT, params={"ids": ",".join(location_ids)}
        )
        result = adapt_delete_result(data, DIGITAL_KEY)
        logger.info("Deleted %d digital locations", result.deleted_count)
        return MutationResult(
            value=result,
            invalidate=(query_keys.DIGITAL_ALL, query_keys.ANALYTICS),
        )

"""
Service: physical locations and sublocations.

Fetchers and mutators consumed by the query-caching collaborator.

Input: TransportClient, request schemas, ids
Output: adapted entities, PhysicalLocationsPage, MutationResult
Side effects: HTTP calls through the transport; data-quality telemetry.
Failure cases: every transport error propagates unchanged; a malformed
    single-record response raises ProtocolViolation.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from storage_sync.application.storage import query_keys
from storage_sync.application.storage.confirmations import (
    adapt_delete_result,
    unwrap_resource,
)
from storage_sync.application.storage.dtos import (
    DeleteResult,
    MutationResult,
    PhysicalLocationsPage,
)
from storage_sync.application.storage.location_adapters import (
    adapt_physical_batch,
    adapt_physical_locations_page,
    adapt_single_physical_location,
    adapt_single_sublocation,
    adapt_sublocation_list,
)
from storage_sync.domain.storage.entities import PhysicalLocation, Sublocation
from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.infrastructure.http.transport_client import TransportClient
from storage_sync.interfaces.storage.schemas import (
    CreatePhysicalLocationRequest,
    CreateSublocationRequest,
    UpdatePhysicalLocationRequest,
    UpdateSublocationRequest,
)

logger = logging.getLogger(__name__)

PHYSICAL_ENDPOINT = "/v1/locations/physical"
SUBLOCATION_ENDPOINT = "/v1/locations/sublocations"

PHYSICAL_KEY = "physical"
SUBLOCATION_KEY = "sublocation"
SUBLOCATIONS_KEY = "sublocations"


def _ids_param(ids: Sequence[str]) -> dict[str, str]:
    if not ids:
        raise ValueError("at least one id is required")
    return {"ids": ",".join(ids)}


class PhysicalLocationService:
    """Orchestrates physical location and sublocation reads and writes.

    Args:
        transport: Configured transport client.
        sink: Sink for adapter data-quality reports. Defaults to the
            transport's sink.
    """

    def __init__(
        self,
        transport: TransportClient,
        sink: Optional[ObservabilitySink] = None,
    ) -> None:
        self._transport = transport
        self._sink = sink if sink is not None else transport.config.sink

    # ------------------------------------------------------------------
    # Physical locations
    # ------------------------------------------------------------------

    async def fetch_page(self) -> PhysicalLocationsPage:
        """Fetch the BFF page of physical locations with their sublocations."""
        data = await self._transport.get(f"{PHYSICAL_ENDPOINT}/bff")
        page = adapt_physical_locations_page(unwrap_resource(data, PHYSICAL_KEY), self._sink)
        logger.info(
            "Fetched %d physical locations, %d sublocations",
            len(page.physical_locations),
            len(page.sublocations),
        )
        return page

    async def list_locations(self) -> tuple[PhysicalLocation, ...]:
        data = await self._transport.get(PHYSICAL_ENDPOINT)
        return adapt_physical_batch(unwrap_resource(data, PHYSICAL_KEY), None, self._sink)

    async def get_location(self, location_id: str) -> PhysicalLocation:
        data = await self._transport.get(f"{PHYSICAL_ENDPOINT}/{location_id}")
        return adapt_single_physical_location(
            unwrap_resource(data, PHYSICAL_KEY), self._sink
        )

    async def create_location(
        self, request: CreatePhysicalLocationRequest
    ) -> MutationResult[PhysicalLocation]:
        """Create a physical location.

        Args:
            request: Validated create body.

        Returns:
            The created location and the keys to invalidate.
        """
        data = await self._transport.post(
            PHYSICAL_ENDPOINT, request.model_dump(mode="json", exclude_none=True)
        )
        location = adapt_single_physical_location(
            unwrap_resource(data, PHYSICAL_KEY), self._sink
        )
        logger.info("Created physical location %s", location.id)
        return MutationResult(
            value=location,
            invalidate=(query_keys.PHYSICAL_ALL, query_keys.ANALYTICS),
        )

    async def update_location(
        self, location_id: str, request: UpdatePhysicalLocationRequest
    ) -> MutationResult[PhysicalLocation]:
        data = await self._transport.put(
            f"{PHYSICAL_ENDPOINT}/{location_id}",
            request.model_dump(mode="json", exclude_none=True, exclude_unset=True),
        )
        location = adapt_single_physical_location(
            unwrap_resource(data, PHYSICAL_KEY), self._sink
        )
        logger.info("Updated physical location %s", location.id)
        return MutationResult(
            value=location,
            invalidate=(
                query_keys.physical_detail(location.id),
                query_keys.PHYSICAL_ALL,
                query_keys.ANALYTICS,
            ),
        )

    async def delete_locations(
        self, location_ids: Sequence[str]
    ) -> MutationResult[DeleteResult]:
        """Bulk delete physical locations (and, server side, their sublocations).

        Raises:
            ValueError: If ``location_ids`` is empty.
        """
        data = await self._transport.delete(
            PHYSICAL_ENDPOINT, params=_ids_param(location_ids)
        )
        result = adapt_delete_result(data, PHYSICAL_KEY)
        logger.info("Deleted %d physical locations", result.deleted_count)
        return MutationResult(
            value=result,
            invalidate=(query_keys.PHYSICAL_ALL, query_keys.ANALYTICS),
        )

    # ------------------------------------------------------------------
    # Sublocations
    # ------------------------------------------------------------------

    async def list_sublocations(self, parent_id: str) -> tuple[Sublocation, ...]:
        data = await self._transport.get(f"{PHYSICAL_ENDPOINT}/{parent_id}/sublocations")
        return adapt_sublocation_list(unwrap_resource(data, SUBLOCATIONS_KEY), self._sink)

    async def create_sublocation(
        self, request: CreateSublocationRequest
    ) -> MutationResult[Sublocation]:
        data = await self._transport.post(
            SUBLOCATION_ENDPOINT, request.model_dump(mode="json", exclude_none=True)
        )
        sublocation = adapt_single_sublocation(
            unwrap_resource(data, SUBLOCATION_KEY), self._sink
        )
        logger.info(
            "Created sublocation %s under %s",
            sublocation.id,
            sublocation.parent_location_id,
        )
        return MutationResult(
            value=sublocation,
            invalidate=self._sublocation_keys(
                sublocation.parent_location_id, [sublocation.id]
            ),
        )

    async def update_sublocation(
        self, sublocation_id: str, request: UpdateSublocationRequest
    ) -> MutationResult[Sublocation]:
        data = await self._transport.put(
            f"{SUBLOCATION_ENDPOINT}/{sublocation_id}",
            request.model_dump(mode="json", exclude_none=True, exclude_unset=True),
        )
        sublocation = adapt_single_sublocation(
            unwrap_resource(data, SUBLOCATION_KEY), self._sink
        )
        return MutationResult(
            value=sublocation,
            invalidate=self._sublocation_keys(
                sublocation.parent_location_id, [sublocation.id]
            ),
        )

    async def delete_sublocations(
        self,
        sublocation_ids: Sequence[str],
        parent_id: Optional[str] = None,
    ) -> MutationResult[DeleteResult]:
        """Bulk delete sublocations.

        Args:
            sublocation_ids: Ids to delete.
            parent_id: Parent location, when known, to scope invalidation.

        Raises:
            ValueError: If ``sublocation_ids`` is empty.
        """
        data = await self._transport.delete(
            SUBLOCATION_ENDPOINT, params=_ids_param(sublocation_ids)
        )
        result = adapt_delete_result(data, SUBLOCATION_KEY)
        logger.info("Deleted %d sublocations", result.deleted_count)
        return MutationResult(
            value=result,
            invalidate=self._sublocation_keys(
                parent_id, result.deleted_ids or tuple(sublocation_ids)
            ),
        )

    @staticmethod
    def _sublocation_keys(
        parent_id: Optional[str], sublocation_ids: Sequence[str]
    ) -> tuple[query_keys.QueryKey, ...]:
        keys = [query_keys.sublocation_detail(s) for s in sublocation_ids]
        if parent_id:
            keys.append(query_keys.physical_sublocations(parent_id))
            keys.append(query_keys.physical_detail(parent_id))
        keys.append(query_keys.PHYSICAL_ALL)
        keys.append(query_keys.ANALYTICS)
        return tuple(keys)

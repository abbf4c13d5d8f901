"""
Storage analytics adapter.

The analytics endpoint nests sublocations and items under their locations
and also reports location totals. Metadata is recomputed from the adapted
entities when both detail arrays are present. Otherwise the server totals
are the only source for location counts and item counts are zero.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from storage_sync.application.storage.digital_adapters import adapt_digital_locations
from storage_sync.application.storage.dtos import StorageOverview
from storage_sync.application.storage.item_adapters import assign_item_ownership
from storage_sync.application.storage.location_adapters import adapt_physical_batch
from storage_sync.application.storage.reporting import report_dropped
from storage_sync.domain.storage.aggregates import (
    compute_metadata,
    server_totals_metadata,
)
from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.interfaces.storage.schemas import RawStorageStats

logger = logging.getLogger(__name__)


def _storage_stats(data: Any, sink: Optional[ObservabilitySink]) -> RawStorageStats:
    storage = data.get("storage") if isinstance(data, dict) else None
    if storage is None:
        return RawStorageStats()
    try:
        return RawStorageStats.model_validate(storage)
    except ValidationError as exc:
        report_dropped(
            sink,
            "storage analytics",
            None,
            f"invalid record ({exc.error_count()} errors)",
        )
        return RawStorageStats()


def adapt_storage_overview(
    data: Any, sink: Optional[ObservabilitySink] = None
) -> StorageOverview:
    """Adapt ``{storage: {...}}`` analytics data.

    Args:
        data: Decoded analytics payload.
        sink: Optional observability sink.

    Returns:
        StorageOverview with physical and digital locations and metadata.
    """
    stats = _storage_stats(data, sink)

    physical = adapt_physical_batch(stats.physical_locations, None, sink)
    digital = adapt_digital_locations(stats.digital_locations, sink)
    physical, digital = assign_item_ownership(physical, digital, sink)

    if stats.physical_locations is None or stats.digital_locations is None:
        logger.info("Storage analytics without detail arrays, using server totals")
        metadata = server_totals_metadata(
            stats.total_physical_locations, stats.total_digital_locations
        )
    else:
        metadata = compute_metadata(physical, digital)

    return StorageOverview(
        physical_locations=physical,
        digital_locations=digital,
        metadata=metadata,
    )

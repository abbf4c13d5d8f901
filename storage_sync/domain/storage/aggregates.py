"""
Storage metadata derivation.

Counts are recomputed from a normalized entity set so they always agree with
the entities the caller holds. When the server omits the detail arrays, its
reported location totals are the only source and item breakdowns are zero.
"""

from collections.abc import Sequence

from storage_sync.domain.storage.entities import (
    DigitalLocation,
    ItemCounts,
    LocationCounts,
    LocationItemCounts,
    PhysicalLocation,
    StorageMetadata,
)


def compute_metadata(
    physical_locations: Sequence[PhysicalLocation],
    digital_locations: Sequence[DigitalLocation],
) -> StorageMetadata:
    """Recompute metadata from normalized locations.

    Physical item counts are the sum of their sublocation counts, so a
    physical location's total and ``in_sublocations`` are always equal.

    Args:
        physical_locations: Adapted physical locations with their sublocations.
        digital_locations: Adapted digital locations.

    Returns:
        StorageMetadata with ``recomputed=True``.
    """
    by_location: dict[str, LocationItemCounts] = {}

    physical_items = 0
    for location in physical_locations:
        count = location.item_count
        physical_items += count
        by_location[location.id] = LocationItemCounts(
            total=count, in_sublocations=count
        )

    digital_items = 0
    for location in digital_locations:
        count = location.item_count
        digital_items += count
        by_location[location.id] = LocationItemCounts(total=count, in_sublocations=0)

    return StorageMetadata(
        locations=LocationCounts(
            total=len(physical_locations) + len(digital_locations),
            physical=len(physical_locations),
            digital=len(digital_locations),
        ),
        items=ItemCounts(
            total=physical_items + digital_items,
            physical=physical_items,
            digital=digital_items,
            by_location=by_location,
        ),
        recomputed=True,
    )


def server_totals_metadata(
    total_physical_locations: int | None,
    total_digital_locations: int | None,
) -> StorageMetadata:
    """Metadata from server-reported totals alone. Missing totals count as zero."""
    physical = total_physical_locations or 0
    digital = total_digital_locations or 0
    return StorageMetadata(
        locations=LocationCounts(
            total=physical + digital, physical=physical, digital=digital
        ),
        items=ItemCounts(),
        recomputed=False,
    )

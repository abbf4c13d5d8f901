"""
Physical location and sublocation adapters.

Pure functions from decoded server data to normalized entities. The only
side effect is data-quality reporting; output depends on input alone, so
adapting the same batch twice yields equal results.

Sublocations reference their parent by id. A sublocation is an entity only
if its parent resolves within the same batch. Orphans are dropped and
reported. Resolved sublocations get the parent's name, type and color
copied at adaptation time.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any, Optional

from storage_sync.application.storage.dtos import PhysicalLocationsPage
from storage_sync.application.storage.item_adapters import (
    adapt_game_items,
    assign_item_ownership,
)
from storage_sync.application.storage.reporting import (
    report_dropped,
    report_fallback,
    validate_records,
)
from storage_sync.domain.storage.aggregates import compute_metadata
from storage_sync.domain.storage.entities import (
    LocationKind,
    MapCoordinates,
    PhysicalLocation,
    Sublocation,
)
from storage_sync.domain.storage.errors import ProtocolViolation
from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.domain.storage.tags import (
    resolve_color,
    resolve_physical_location_type,
    resolve_sublocation_type,
)
from storage_sync.interfaces.storage.schemas import (
    RawMapCoordinates,
    RawPhysicalLocation,
    RawSublocation,
)

logger = logging.getLogger(__name__)


def _map_coordinates(raw: Optional[RawMapCoordinates]) -> Optional[MapCoordinates]:
    if raw is None or (not raw.coords and not raw.map_link):
        return None
    return MapCoordinates(coords=raw.coords, map_link=raw.map_link or None)


def adapt_physical_location(
    raw: RawPhysicalLocation, sink: Optional[ObservabilitySink] = None
) -> PhysicalLocation:
    """Adapt one physical location without its sublocations."""
    location_type, type_event = resolve_physical_location_type(raw.location_type)
    report_fallback(sink, type_event)
    color, color_event = resolve_color(raw.bg_color)
    report_fallback(sink, color_event)

    return PhysicalLocation(
        id=raw.id,
        name=raw.name,
        location_type=location_type,
        map_coordinates=_map_coordinates(raw.map_coordinates),
        color=color,
        created_at=raw.created_at,
        updated_at=raw.updated_at,
    )


def adapt_sublocation(
    raw: RawSublocation,
    parent: PhysicalLocation,
    sink: Optional[ObservabilitySink] = None,
) -> Sublocation:
    """Adapt one sublocation against its resolved parent.

    The sublocation's own color wins; otherwise it inherits the parent's.
    """
    sublocation_type, type_event = resolve_sublocation_type(raw.sublocation_type)
    report_fallback(sink, type_event)
    own_color, color_event = resolve_color(raw.bg_color)
    report_fallback(sink, color_event)

    return Sublocation(
        id=raw.id,
        name=raw.name,
        sublocation_type=sublocation_type,
        parent_location_id=parent.id,
        parent_location_name=parent.name,
        parent_location_type=parent.location_type,
        parent_location_color=parent.color,
        color=own_color or parent.color,
        stored_items=raw.stored_items,
        items=adapt_game_items(
            raw.items, owner_id=raw.id, owner_kind=LocationKind.PHYSICAL, sink=sink
        ),
        notes=raw.notes,
        created_at=raw.created_at,
        updated_at=raw.updated_at,
    )


def _unique_locations(
    raw_locations: Sequence[RawPhysicalLocation],
    sink: Optional[ObservabilitySink],
) -> list[RawPhysicalLocation]:
    seen: set[str] = set()
    unique = []
    for raw in raw_locations:
        if raw.id in seen:
            report_dropped(sink, "physical location", raw.id, "duplicate id")
            continue
        seen.add(raw.id)
        unique.append(raw)
    return unique


def resolve_sublocations(
    locations: Sequence[PhysicalLocation],
    raw_sublocations: Sequence[RawSublocation],
    sink: Optional[ObservabilitySink] = None,
) -> tuple[Sublocation, ...]:
    """Resolve each sublocation's parent within the batch, dropping orphans.

    Args:
        locations: Adapted physical locations of the same batch.
        raw_sublocations: Validated sublocation records.
        sink: Optional observability sink for orphan reports.

    Returns:
        Resolved sublocations in input order.
    """
    parents = {location.id: location for location in locations}
    resolved = []
    seen: set[str] = set()
    for raw in raw_sublocations:
        parent = parents.get(raw.parent_location_id or "")
        if parent is None:
            report_dropped(
                sink,
                "sublocation",
                raw.id,
                f"parent {raw.parent_location_id!r} not in batch",
            )
            continue
        if raw.id in seen:
            report_dropped(sink, "sublocation", raw.id, "duplicate id")
            continue
        seen.add(raw.id)
        resolved.append(adapt_sublocation(raw, parent, sink))
    return tuple(resolved)


def attach_sublocations(
    locations: Sequence[PhysicalLocation],
    sublocations: Sequence[Sublocation],
) -> tuple[PhysicalLocation, ...]:
    """Give every location the ordered tuple of sublocations it owns."""
    owned: dict[str, list[Sublocation]] = {location.id: [] for location in locations}
    for sublocation in sublocations:
        owned[sublocation.parent_location_id].append(sublocation)
    return tuple(
        replace(location, sublocations=tuple(owned[location.id]))
        for location in locations
    )


def _nested_sublocations(
    raw_location: RawPhysicalLocation, sink: Optional[ObservabilitySink]
) -> list[RawSublocation]:
    return [
        raw.model_copy(update={"parent_location_id": raw_location.id})
        for raw in validate_records(
            RawSublocation, raw_location.sublocations, kind="sublocation", sink=sink
        )
    ]


def adapt_physical_batch(
    raw_locations: Any,
    raw_sublocations: Any = None,
    sink: Optional[ObservabilitySink] = None,
) -> tuple[PhysicalLocation, ...]:
    """Adapt physical locations and their sublocations as one batch.

    Sublocations may come as a flat list referencing parents by id, nested
    under each location, or both.

    Args:
        raw_locations: Raw physical location records.
        raw_sublocations: Raw flat sublocation records, if any.
        sink: Optional observability sink.

    Returns:
        Physical locations owning their resolved sublocations.
    """
    valid_locations = _unique_locations(
        validate_records(
            RawPhysicalLocation, raw_locations, kind="physical location", sink=sink
        ),
        sink,
    )
    locations = [adapt_physical_location(raw, sink) for raw in valid_locations]

    all_raw_sublocations: list[RawSublocation] = []
    for raw in valid_locations:
        all_raw_sublocations.extend(_nested_sublocations(raw, sink))
    all_raw_sublocations.extend(
        validate_records(
            RawSublocation, raw_sublocations, kind="sublocation", sink=sink
        )
    )

    sublocations = resolve_sublocations(locations, all_raw_sublocations, sink)
    return attach_sublocations(locations, sublocations)


def adapt_physical_locations_page(
    data: Any, sink: Optional[ObservabilitySink] = None
) -> PhysicalLocationsPage:
    """Adapt the physical locations BFF payload.

    Args:
        data: Decoded ``{physicalLocations: [...], sublocations: [...]}``.
        sink: Optional observability sink.

    Returns:
        PhysicalLocationsPage with recomputed metadata.
    """
    if not isinstance(data, dict):
        data = {}
        report_dropped(sink, "physical locations page", None, "expected an object")

    physical = adapt_physical_batch(
        data.get("physicalLocations"), data.get("sublocations"), sink
    )
    physical, _ = assign_item_ownership(physical, (), sink)

    logger.debug(
        "Adapted %d physical locations from BFF page", len(physical)
    )
    return PhysicalLocationsPage(
        physical_locations=physical,
        sublocations=tuple(s for location in physical for s in location.sublocations),
        metadata=compute_metadata(physical, ()),
    )


def adapt_single_physical_location(
    record: Any, sink: Optional[ObservabilitySink] = None
) -> PhysicalLocation:
    """Adapt a create/update/detail response holding one physical location.

    Raises:
        ProtocolViolation: If the record is not a valid physical location.
    """
    locations = adapt_physical_batch([record], None, sink)
    if not locations:
        raise ProtocolViolation("invalid physical location record")
    return locations[0]


def adapt_single_sublocation(
    record: Any, sink: Optional[ObservabilitySink] = None
) -> Sublocation:
    """Adapt a create/update response holding one sublocation.

    The parent is not part of the response batch, so its display fields
    come from the server's own ``parent*`` fields.

    Raises:
        ProtocolViolation: If the record is invalid or names no parent.
    """
    raws = validate_records(RawSublocation, [record], kind="sublocation", sink=sink)
    if not raws or not raws[0].parent_location_id:
        raise ProtocolViolation("invalid sublocation record")
    return _adapt_with_reported_parent(raws[0], sink)


def adapt_sublocation_list(
    records: Any, sink: Optional[ObservabilitySink] = None
) -> tuple[Sublocation, ...]:
    """Adapt a list of sublocation records that carry their parent fields.

    Records without a parent id are dropped and reported.
    """
    sublocations = []
    for raw in validate_records(RawSublocation, records, kind="sublocation", sink=sink):
        if not raw.parent_location_id:
            report_dropped(sink, "sublocation", raw.id, "no parent location id")
            continue
        sublocations.append(_adapt_with_reported_parent(raw, sink))
    return tuple(sublocations)


def _adapt_with_reported_parent(
    raw: RawSublocation, sink: Optional[ObservabilitySink]
) -> Sublocation:
    parent = adapt_physical_location(
        RawPhysicalLocation(
            id=raw.parent_location_id,
            name=raw.parent_location_name or raw.parent_location_id,
            location_type=raw.parent_location_type,
            bg_color=raw.parent_location_bg_color,
        ),
        sink,
    )
    return adapt_sublocation(raw, parent, sink)

"""
Game item adaptation and ownership.

Items arrive nested under sublocations and digital locations, and the same
game can show up under more than one path. In the normalized model an item
has exactly one owner: the first location that lists it, visiting physical
locations (and their sublocations) in order before digital locations.
"""

from collections.abc import Sequence
from dataclasses import replace
from typing import Any, Optional

from storage_sync.application.storage.reporting import report_dropped, validate_records
from storage_sync.domain.storage.entities import (
    DigitalLocation,
    GameItem,
    LocationKind,
    PhysicalLocation,
    make_label,
)
from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.interfaces.storage.schemas import RawGameItem


def adapt_game_item(raw: RawGameItem, owner_id: str, owner_kind: LocationKind) -> GameItem:
    return GameItem(
        id=raw.id,
        name=raw.name,
        label=make_label(raw.name),
        platform=raw.platform,
        owner_id=owner_id,
        owner_kind=owner_kind,
        acquired_date=raw.acquired_date,
        platform_version=raw.platform_version,
        condition=raw.condition,
        has_original_case=raw.has_original_case,
        has_manual=raw.has_manual,
    )


def adapt_game_items(
    raw_items: Any,
    *,
    owner_id: str,
    owner_kind: LocationKind,
    sink: Optional[ObservabilitySink] = None,
) -> tuple[GameItem, ...]:
    """Validate and adapt the items listed under one location."""
    return tuple(
        adapt_game_item(raw, owner_id, owner_kind)
        for raw in validate_records(RawGameItem, raw_items, kind="game item", sink=sink)
    )


def assign_item_ownership(
    physical_locations: Sequence[PhysicalLocation],
    digital_locations: Sequence[DigitalLocation],
    sink: Optional[ObservabilitySink] = None,
) -> tuple[tuple[PhysicalLocation, ...], tuple[DigitalLocation, ...]]:
    """Keep every item under its first owner only.

    Args:
        physical_locations: Adapted physical locations with sublocations.
        digital_locations: Adapted digital locations.
        sink: Optional observability sink for duplicate reports.

    Returns:
        New physical and digital location tuples with duplicates removed.
        A location that listed items gets ``stored_items`` set to the kept
        count, so an owner whose every item was a duplicate counts zero.
    """
    seen: set[str] = set()

    def _claim(location):
        if not location.items:
            return location
        kept = []
        for item in location.items:
            if item.id in seen:
                report_dropped(
                    sink, "game item", item.id, f"already owned, duplicate under {location.id}"
                )
                continue
            seen.add(item.id)
            kept.append(item)
        return replace(location, items=tuple(kept), stored_items=len(kept))

    physical = tuple(
        replace(location, sublocations=tuple(_claim(sub) for sub in location.sublocations))
        for location in physical_locations
    )
    digital = tuple(_claim(location) for location in digital_locations)
    return physical, digital

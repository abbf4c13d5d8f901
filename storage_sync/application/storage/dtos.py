"""
Data Transfer Objects for the storage application layer.

DTOs carry adapted entities from the services to the UI and the
query-caching collaborator. They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from storage_sync.application.storage.query_keys import QueryKey
from storage_sync.domain.storage.entities import (
    DigitalLocation,
    PhysicalLocation,
    StorageMetadata,
    Sublocation,
)

T = TypeVar("T")


@dataclass(frozen=True)
class PhysicalLocationsPage:
    """Adapted physical locations BFF payload.

    Attributes:
        physical_locations: Locations, each owning its resolved sublocations.
        sublocations: The same sublocations as a flat list, grouped by parent.
        metadata: Counts recomputed from the entities above.
    """

    physical_locations: tuple[PhysicalLocation, ...]
    sublocations: tuple[Sublocation, ...]
    metadata: StorageMetadata


@dataclass(frozen=True)
class DigitalLocationsPage:
    """Adapted digital locations BFF payload."""

    digital_locations: tuple[DigitalLocation, ...]
    metadata: StorageMetadata


@dataclass(frozen=True)
class StorageOverview:
    """Adapted storage analytics.

    Attributes:
        physical_locations: Physical locations with nested sublocations.
        digital_locations: Digital locations.
        metadata: Recomputed counts, or server totals when detail was missing.
    """

    physical_locations: tuple[PhysicalLocation, ...]
    digital_locations: tuple[DigitalLocation, ...]
    metadata: StorageMetadata


@dataclass(frozen=True)
class DeleteResult:
    """Server confirmation of a bulk delete.

    Attributes:
        deleted_count: Number of records the server removed.
        deleted_ids: Ids the server names as deleted.
    """

    deleted_count: int
    deleted_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """Outcome of a mutation plus the cache keys it invalidates.

    Attributes:
        value: The adapted entity or DeleteResult.
        invalidate: Cache key prefixes the caller should invalidate.
    """

    value: T
    invalidate: tuple[QueryKey, ...] = field(default_factory=tuple)

"""
Pydantic schemas for storage backend payloads.

Raw* schemas validate single records from decoded (camelCase) response
data before adaptation. They tolerate the different spellings the BFF,
analytics and CRUD endpoints use for the same field. Nested collections
are kept as plain dicts so that one bad child record never takes down its
parent; adapters validate children one by one.

*Request schemas define the outbound mutation bodies.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from dateutil.parser import isoparse
from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)

from storage_sync.domain.storage.entities import (
    BillingCycle,
    IconColor,
    PaymentMethod,
    PhysicalLocationType,
    SublocationType,
)

# Go's zero time.Time, sent for unset timestamps
GO_ZERO_YEAR = 1


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = isoparse(value)
    else:
        raise ValueError(f"unsupported timestamp {value!r}")
    if parsed.year == GO_ZERO_YEAR:
        return None
    return parsed


def _as_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


Timestamp = Annotated[Optional[datetime], BeforeValidator(_parse_timestamp)]
RecordId = Annotated[str, BeforeValidator(_as_id), Field(min_length=1)]
ReferenceId = Annotated[Optional[str], BeforeValidator(_as_id)]


class _RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# Inbound records
# ---------------------------------------------------------------------------


class RawMapCoordinates(_RawRecord):
    """Map coordinates, either an object or a bare coordinates string."""

    coords: str = ""
    map_link: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("googleMapsLink", "mapLink")
    )


class RawGameItem(_RawRecord):
    """A game nested under a sublocation or digital location."""

    id: RecordId
    name: str = Field(min_length=1)
    platform: str = ""
    platform_version: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("platformVersion")
    )
    acquired_date: Timestamp = Field(
        default=None, validation_alias=AliasChoices("acquiredDate")
    )
    condition: Optional[str] = None
    has_original_case: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("hasOriginalCase")
    )
    has_manual: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("hasManual")
    )


class RawSublocation(_RawRecord):
    """A sublocation from the BFF list, a CRUD response or analytics nesting.

    ``parent_location_id`` is absent when the record is nested under its
    parent; the adapter fills it from the nesting. The server's own parent
    display fields are read only for single-record responses, where the
    parent is not part of the batch.
    """

    id: RecordId = Field(validation_alias=AliasChoices("sublocationId", "id"))
    name: str = Field(
        min_length=1, validation_alias=AliasChoices("sublocationName", "name")
    )
    sublocation_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sublocationType", "locationType", "type"),
    )
    parent_location_id: ReferenceId = Field(
        default=None,
        validation_alias=AliasChoices("parentLocationId", "physicalLocationId"),
    )
    parent_location_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "parentLocationName", "parentPhysicalLocationName"
        ),
    )
    parent_location_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "parentLocationType", "parentPhysicalLocationType"
        ),
    )
    parent_location_bg_color: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "parentLocationBgColor", "parentPhysicalLocationBgColor"
        ),
    )
    stored_items: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("storedItems", "itemCount")
    )
    bg_color: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("bgColor")
    )
    notes: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("notes", "description")
    )
    items: list[dict[str, Any]] = Field(default_factory=list)
    created_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("createdAt")
    )
    updated_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("updatedAt")
    )


class RawPhysicalLocation(_RawRecord):
    """A physical location from the BFF list, CRUD or analytics payloads."""

    id: RecordId = Field(validation_alias=AliasChoices("physicalLocationId", "id"))
    name: str = Field(min_length=1)
    location_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("physicalLocationType", "locationType", "type"),
    )
    map_coordinates: Optional[RawMapCoordinates] = Field(
        default=None, validation_alias=AliasChoices("mapCoordinates")
    )
    bg_color: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("bgColor")
    )
    sublocations: list[dict[str, Any]] = Field(default_factory=list)
    created_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("createdAt")
    )
    updated_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("updatedAt")
    )

    @field_validator("map_coordinates", mode="before")
    @classmethod
    def coords_from_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"coords": value} if value else None
        return value


class RawBilling(_RawRecord):
    """Billing block of a formatted digital location."""

    cycle: Optional[str] = None
    payment_method: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("paymentMethod")
    )


class RawDigitalLocation(_RawRecord):
    """A digital location from the BFF list, CRUD or analytics payloads."""

    id: RecordId
    name: str = Field(min_length=1)
    location_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("locationType", "platform", "type"),
    )
    is_active: bool = Field(default=True, validation_alias=AliasChoices("isActive"))
    is_subscription: bool = Field(
        default=False,
        validation_alias=AliasChoices("isSubscription", "isSubscriptionService"),
    )
    monthly_cost: Optional[Decimal] = Field(
        default=None, validation_alias=AliasChoices("monthlyCost")
    )
    cost_per_cycle: Optional[Decimal] = Field(
        default=None, validation_alias=AliasChoices("costPerCycle")
    )
    billing_cycle: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("billingCycle")
    )
    next_payment_date: Timestamp = Field(
        default=None, validation_alias=AliasChoices("nextPaymentDate")
    )
    payment_method: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("paymentMethod")
    )
    billing: Optional[RawBilling] = None
    url: Optional[str] = None
    items: list[dict[str, Any]] = Field(default_factory=list)
    item_count: int = Field(default=0, ge=0, validation_alias=AliasChoices("itemCount"))
    created_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("createdAt")
    )
    updated_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("updatedAt")
    )


class RawDeleteConfirmation(_RawRecord):
    """Bulk delete confirmation for locations or sublocations."""

    deleted_count: int = Field(ge=0, validation_alias=AliasChoices("deletedCount"))
    ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("locationIds", "sublocationIds", "ids"),
    )


class RawStorageStats(_RawRecord):
    """Storage section of the analytics response.

    The detail arrays are None when the server omitted them, which is
    different from an empty list.
    """

    total_physical_locations: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("totalPhysicalLocations")
    )
    total_digital_locations: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("totalDigitalLocations")
    )
    physical_locations: Optional[list[dict[str, Any]]] = Field(
        default=None, validation_alias=AliasChoices("physicalLocations")
    )
    digital_locations: Optional[list[dict[str, Any]]] = Field(
        default=None, validation_alias=AliasChoices("digitalLocations")
    )


# ---------------------------------------------------------------------------
# Outbound mutation bodies
# ---------------------------------------------------------------------------


class CreatePhysicalLocationRequest(BaseModel):
    """Body for creating a physical location.

    Attributes:
        name: Display name.
        location_type: Closed-set physical location type.
        map_coordinates: Raw coordinates string.
        bg_color: Icon color.
    """

    name: str = Field(..., min_length=1, max_length=100)
    location_type: PhysicalLocationType
    map_coordinates: Optional[str] = None
    bg_color: Optional[IconColor] = None


class UpdatePhysicalLocationRequest(BaseModel):
    """Body for a partial physical location update. Unset fields are not sent."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location_type: Optional[PhysicalLocationType] = None
    map_coordinates: Optional[str] = None
    bg_color: Optional[IconColor] = None


class CreateSublocationRequest(BaseModel):
    """Body for creating a sublocation under a physical location."""

    name: str = Field(..., min_length=1, max_length=100)
    location_type: SublocationType
    physical_location_id: str = Field(..., min_length=1)
    bg_color: Optional[IconColor] = None
    stored_items: int = Field(default=0, ge=0)


class UpdateSublocationRequest(BaseModel):
    """Body for a partial sublocation update."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location_type: Optional[SublocationType] = None
    physical_location_id: Optional[str] = None
    bg_color: Optional[IconColor] = None
    stored_items: Optional[int] = Field(default=None, ge=0)


class SubscriptionRequest(BaseModel):
    """Subscription block for a digital location."""

    billing_cycle: BillingCycle
    cost_per_cycle: Decimal = Field(..., ge=0)
    next_payment_date: datetime
    payment_method: PaymentMethod = PaymentMethod.GENERIC


class CreateDigitalLocationRequest(BaseModel):
    """Body for creating a digital location."""

    name: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True
    url: Optional[str] = None
    is_subscription: bool = False
    payment_method: Optional[PaymentMethod] = None
    subscription: Optional[SubscriptionRequest] = None


class UpdateDigitalLocationRequest(BaseModel):
    """Body for a partial digital location update."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    is_active: Optional[bool] = None
    url: Optional[str] = None
    is_subscription: Optional[bool] = None
    payment_method: Optional[PaymentMethod] = None
    subscription: Optional[SubscriptionRequest] = None

"""
Digital location adapters.

Platform, billing cycle and payment method arrive as free text and are
mapped onto closed tags. Unknown platforms become the first supported
platform and unknown payment methods become ``generic``; both are reported,
never raised.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from storage_sync.application.storage.dtos import DigitalLocationsPage
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
    BillingCycle,
    DigitalLocation,
    GamePlatform,
    LocationKind,
    PaymentMethod,
)
from storage_sync.domain.storage.errors import ProtocolViolation
from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.domain.storage.tags import (
    BILLING_CYCLE_MONTHS,
    BILLING_CYCLE_TABLE,
    DEFAULT_PAYMENT_METHOD,
    lookup,
    resolve_billing_cycle,
    resolve_payment_method,
    resolve_platform,
)
from storage_sync.interfaces.storage.schemas import RawDigitalLocation

CENT = Decimal("0.01")


def _platform(raw: RawDigitalLocation, sink: Optional[ObservabilitySink]) -> GamePlatform:
    # an explicit type is authoritative; the name is a hint only when it is absent
    if raw.location_type:
        platform, event = resolve_platform(raw.location_type)
    else:
        platform, event = resolve_platform(raw.name)
    report_fallback(sink, event)
    return platform


def _billing_cycle(
    raw: RawDigitalLocation, sink: Optional[ObservabilitySink]
) -> Optional[BillingCycle]:
    cycle = raw.billing_cycle or (raw.billing.cycle if raw.billing else None)
    if not raw.is_subscription:
        return lookup(BILLING_CYCLE_TABLE, cycle)
    billing_cycle, event = resolve_billing_cycle(cycle)
    report_fallback(sink, event)
    return billing_cycle


def _payment_method(
    raw: RawDigitalLocation, sink: Optional[ObservabilitySink]
) -> PaymentMethod:
    method = raw.payment_method or (raw.billing.payment_method if raw.billing else None)
    if not method:
        return DEFAULT_PAYMENT_METHOD
    payment_method, event = resolve_payment_method(method)
    report_fallback(sink, event)
    return payment_method


def _monthly_cost(
    raw: RawDigitalLocation, billing_cycle: Optional[BillingCycle]
) -> Decimal:
    if raw.monthly_cost is not None:
        return raw.monthly_cost
    if raw.cost_per_cycle is not None and billing_cycle is not None:
        months = BILLING_CYCLE_MONTHS[billing_cycle]
        return (raw.cost_per_cycle / months).quantize(CENT, rounding=ROUND_HALF_UP)
    return Decimal("0")


def adapt_digital_location(
    raw: RawDigitalLocation, sink: Optional[ObservabilitySink] = None
) -> DigitalLocation:
    """Adapt one validated digital location record.

    Args:
        raw: Validated record.
        sink: Optional observability sink for fallback reports.

    Returns:
        DigitalLocation owning its items.
    """
    billing_cycle = _billing_cycle(raw, sink)
    return DigitalLocation(
        id=raw.id,
        name=raw.name,
        platform=_platform(raw, sink),
        is_subscription=raw.is_subscription,
        is_active=raw.is_active,
        monthly_cost=_monthly_cost(raw, billing_cycle),
        billing_cycle=billing_cycle,
        next_payment_date=raw.next_payment_date,
        payment_method=_payment_method(raw, sink),
        url=raw.url or None,
        items=adapt_game_items(
            raw.items, owner_id=raw.id, owner_kind=LocationKind.DIGITAL, sink=sink
        ),
        stored_items=raw.item_count,
        created_at=raw.created_at,
        updated_at=raw.updated_at,
    )


def adapt_digital_locations(
    raw_locations: Any, sink: Optional[ObservabilitySink] = None
) -> tuple[DigitalLocation, ...]:
    """Validate and adapt a list of digital location records, skipping duplicates."""
    seen: set[str] = set()
    locations = []
    for raw in validate_records(
        RawDigitalLocation, raw_locations, kind="digital location", sink=sink
    ):
        if raw.id in seen:
            report_dropped(sink, "digital location", raw.id, "duplicate id")
            continue
        seen.add(raw.id)
        locations.append(adapt_digital_location(raw, sink))
    return tuple(locations)


def adapt_digital_locations_page(
    data: Any, sink: Optional[ObservabilitySink] = None
) -> DigitalLocationsPage:
    """Adapt the digital locations BFF payload ``{digitalLocations: [...]}``.

    A bare list of records is accepted as well.
    """
    if isinstance(data, dict):
        records = data.get("digitalLocations")
    else:
        records = data
    _, digital = assign_item_ownership((), adapt_digital_locations(records, sink), sink)
    return DigitalLocationsPage(
        digital_locations=digital,
        metadata=compute_metadata((), digital),
    )


def adapt_single_digital_location(
    record: Any, sink: Optional[ObservabilitySink] = None
) -> DigitalLocation:
    """Adapt a create/update/detail response holding one digital location.

    Raises:
        ProtocolViolation: If the record is not a valid digital location.
    """
    locations = adapt_digital_locations([record], sink)
    if not locations:
        raise ProtocolViolation("invalid digital location record")
    return locations[0]

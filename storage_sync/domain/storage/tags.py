"""
Closed-set tag tables.

Free-text vendor values from the server are mapped onto the closed enums in
``entities``. Lookups are case-insensitive and whitespace-tolerant. Unknown
values never raise: the resolver returns the documented default together
with an ``UnknownTagFallback`` describing the substitution.
"""

from enum import Enum
from typing import Any, Optional, TypeVar

from storage_sync.domain.storage.entities import (
    BillingCycle,
    GamePlatform,
    IconColor,
    PaymentMethod,
    PhysicalLocationType,
    SublocationType,
)
from storage_sync.domain.storage.errors import UnknownTagFallback

T = TypeVar("T", bound=Enum)

DEFAULT_PLATFORM = list(GamePlatform)[0]
DEFAULT_PAYMENT_METHOD = PaymentMethod.GENERIC
DEFAULT_BILLING_CYCLE = BillingCycle.MONTHLY
DEFAULT_PHYSICAL_LOCATION_TYPE = PhysicalLocationType.HOUSE
DEFAULT_SUBLOCATION_TYPE = SublocationType.SHELF


def _by_value(enum_cls: type[T]) -> dict[str, T]:
    return {member.value: member for member in enum_cls}


PLATFORM_TABLE: dict[str, GamePlatform] = {
    **_by_value(GamePlatform),
    "steam store": GamePlatform.STEAM,
    "epic games": GamePlatform.EPIC,
    "epic games store": GamePlatform.EPIC,
    "gog.com": GamePlatform.GOG,
    "sony": GamePlatform.PLAYSTATION,
    "psn": GamePlatform.PLAYSTATION,
    "playstation network": GamePlatform.PLAYSTATION,
    "playstation plus": GamePlatform.PLAYSTATION,
    "microsoft": GamePlatform.XBOX,
    "xbox network": GamePlatform.XBOX,
    "xbox game pass": GamePlatform.XBOX,
    "nintendo eshop": GamePlatform.NINTENDO,
    "nintendo switch online": GamePlatform.NINTENDO,
}

PAYMENT_METHOD_TABLE: dict[str, PaymentMethod] = {
    **_by_value(PaymentMethod),
    "american express": PaymentMethod.AMEX,
    "diners club": PaymentMethod.DINERS,
    "master card": PaymentMethod.MASTERCARD,
    "union pay": PaymentMethod.UNIONPAY,
}

BILLING_CYCLE_TABLE: dict[str, BillingCycle] = {
    **_by_value(BillingCycle),
    "1 month": BillingCycle.MONTHLY,
    "3 months": BillingCycle.QUARTERLY,
    "3 month": BillingCycle.QUARTERLY,
    "6 months": BillingCycle.SEMI_ANNUAL,
    "6 month": BillingCycle.SEMI_ANNUAL,
    "semi-annual": BillingCycle.SEMI_ANNUAL,
    "1 year": BillingCycle.ANNUAL,
    "12 months": BillingCycle.ANNUAL,
    "12 month": BillingCycle.ANNUAL,
    "yearly": BillingCycle.ANNUAL,
}

PHYSICAL_LOCATION_TYPE_TABLE = _by_value(PhysicalLocationType)
SUBLOCATION_TYPE_TABLE = _by_value(SublocationType)
ICON_COLOR_TABLE: dict[str, IconColor] = {**_by_value(IconColor), "grey": IconColor.GRAY}

# Months per billing period, used to normalize cost per cycle to a monthly cost.
BILLING_CYCLE_MONTHS: dict[BillingCycle, int] = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.SEMI_ANNUAL: 6,
    BillingCycle.ANNUAL: 12,
}


def _normalize(raw: Any) -> str:
    return str(raw).strip().lower()


def lookup(table: dict[str, T], raw: Any) -> Optional[T]:
    """Return the table entry for ``raw`` or None. Never falls back."""
    if raw is None:
        return None
    return table.get(_normalize(raw))


def resolve(
    table: dict[str, T],
    raw: Any,
    default: Any,
    field: str,
) -> tuple[Any, Optional[UnknownTagFallback]]:
    """Map a raw value through ``table``.

    Args:
        table: Lowercased lookup table.
        raw: Raw server value, possibly None.
        default: Value used when ``raw`` is unknown.
        field: Field name reported in the fallback event.

    Returns:
        ``(tag, None)`` on a hit, ``(default, UnknownTagFallback)`` otherwise.
    """
    tag = lookup(table, raw)
    if tag is not None:
        return tag, None
    return default, UnknownTagFallback(field, raw, default)


def resolve_platform(*candidates: Any) -> tuple[GamePlatform, Optional[UnknownTagFallback]]:
    """Resolve a platform from the first candidate that matches.

    Unknown values fall back to the first supported platform. The fallback
    event names the first non-empty candidate.
    """
    for candidate in candidates:
        tag = lookup(PLATFORM_TABLE, candidate)
        if tag is not None:
            return tag, None
    reported = next((c for c in candidates if c), None)
    return DEFAULT_PLATFORM, UnknownTagFallback("platform", reported, DEFAULT_PLATFORM)


def resolve_payment_method(raw: Any) -> tuple[PaymentMethod, Optional[UnknownTagFallback]]:
    return resolve(PAYMENT_METHOD_TABLE, raw, DEFAULT_PAYMENT_METHOD, "payment_method")


def resolve_billing_cycle(raw: Any) -> tuple[BillingCycle, Optional[UnknownTagFallback]]:
    return resolve(BILLING_CYCLE_TABLE, raw, DEFAULT_BILLING_CYCLE, "billing_cycle")


def resolve_physical_location_type(
    raw: Any,
) -> tuple[PhysicalLocationType, Optional[UnknownTagFallback]]:
    return resolve(
        PHYSICAL_LOCATION_TYPE_TABLE,
        raw,
        DEFAULT_PHYSICAL_LOCATION_TYPE,
        "location_type",
    )


def resolve_sublocation_type(
    raw: Any,
) -> tuple[SublocationType, Optional[UnknownTagFallback]]:
    return resolve(
        SUBLOCATION_TYPE_TABLE, raw, DEFAULT_SUBLOCATION_TYPE, "sublocation_type"
    )


def resolve_color(raw: Any) -> tuple[Optional[IconColor], Optional[UnknownTagFallback]]:
    """Resolve an icon color. Missing is not an error; unknown maps to no color."""
    if raw is None or _normalize(raw) == "":
        return None, None
    return resolve(ICON_COLOR_TABLE, raw, None, "color")

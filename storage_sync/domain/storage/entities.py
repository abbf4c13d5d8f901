"""
Domain entities for the storage bounded context.

Entities are created only by decoding a server response and are never
patched in place: a change means a new instance. They contain no framework
imports and no IO operations.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class LocationKind(Enum):
    """Which side of the storage model owns an item."""

    PHYSICAL = "physical"
    DIGITAL = "digital"


class PhysicalLocationType(Enum):
    """Real-world storage environments."""

    HOUSE = "house"
    APARTMENT = "apartment"
    OFFICE = "office"
    WAREHOUSE = "warehouse"
    VEHICLE = "vehicle"


class SublocationType(Enum):
    """Storage units or furniture inside a physical location."""

    SHELF = "shelf"
    CONSOLE = "console"
    CABINET = "cabinet"
    CLOSET = "closet"
    DRAWER = "drawer"
    BOX = "box"
    DEVICE = "device"


class GamePlatform(Enum):
    """Digital distribution platforms. Declaration order matters: the first is the fallback."""

    STEAM = "steam"
    EPIC = "epic"
    GOG = "gog"
    PLAYSTATION = "playstation"
    XBOX = "xbox"
    NINTENDO = "nintendo"


class PaymentMethod(Enum):
    """Payment method icon tags."""

    ALIPAY = "alipay"
    AMEX = "amex"
    DINERS = "diners"
    DISCOVER = "discover"
    ELO = "elo"
    GENERIC = "generic"
    HIPER = "hiper"
    HIPERCARD = "hipercard"
    JCB = "jcb"
    MAESTRO = "maestro"
    MASTERCARD = "mastercard"
    MIR = "mir"
    PAYPAL = "paypal"
    UNIONPAY = "unionpay"
    VISA = "visa"


class BillingCycle(Enum):
    """Subscription billing periods."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"


class IconColor(Enum):
    """Location icon background colors."""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    ORANGE = "orange"
    GOLD = "gold"
    PURPLE = "purple"
    BROWN = "brown"
    PINK = "pink"
    GRAY = "gray"


@dataclass(frozen=True)
class MapCoordinates:
    """Raw coordinates string plus an optional map-service link."""

    coords: str
    map_link: Optional[str] = None


@dataclass(frozen=True)
class GameItem:
    """A game owned by exactly one location in the normalized model."""

    id: str
    name: str
    label: str
    platform: str
    owner_id: str
    owner_kind: LocationKind
    acquired_date: Optional[datetime] = None
    platform_version: Optional[str] = None
    condition: Optional[str] = None
    has_original_case: Optional[bool] = None
    has_manual: Optional[bool] = None


@dataclass(frozen=True)
class Sublocation:
    """A storage unit inside one physical location.

    The ``parent_*`` fields are copied from the parent when the batch is
    adapted. They are a snapshot and go stale if the parent is edited
    without a re-fetch.
    """

    id: str
    name: str
    sublocation_type: SublocationType
    parent_location_id: str
    parent_location_name: str
    parent_location_type: PhysicalLocationType
    parent_location_color: Optional[IconColor]
    color: Optional[IconColor]
    stored_items: int
    items: tuple[GameItem, ...] = ()
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        # BFF pages carry only the server count, analytics pages carry items.
        # Ownership assignment keeps stored_items equal to the kept items.
        return len(self.items) if self.items else self.stored_items


@dataclass(frozen=True)
class PhysicalLocation:
    """A real-world place that owns an ordered set of sublocations."""

    id: str
    name: str
    location_type: PhysicalLocationType
    map_coordinates: Optional[MapCoordinates] = None
    color: Optional[IconColor] = None
    sublocations: tuple[Sublocation, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        return sum(s.item_count for s in self.sublocations)


@dataclass(frozen=True)
class DigitalLocation:
    """A digital storefront or subscription service holding games."""

    id: str
    name: str
    platform: GamePlatform
    is_subscription: bool = False
    is_active: bool = True
    monthly_cost: Decimal = Decimal("0")
    billing_cycle: Optional[BillingCycle] = None
    next_payment_date: Optional[datetime] = None
    payment_method: PaymentMethod = PaymentMethod.GENERIC
    url: Optional[str] = None
    items: tuple[GameItem, ...] = ()
    stored_items: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        return len(self.items) if self.items else self.stored_items


@dataclass(frozen=True)
class LocationCounts:
    """Number of storage locations by kind."""

    total: int = 0
    physical: int = 0
    digital: int = 0


@dataclass(frozen=True)
class LocationItemCounts:
    """Item totals for a single location."""

    total: int = 0
    in_sublocations: int = 0


@dataclass(frozen=True)
class ItemCounts:
    """Item totals by kind and by location id."""

    total: int = 0
    physical: int = 0
    digital: int = 0
    by_location: dict[str, LocationItemCounts] = field(default_factory=dict)


@dataclass(frozen=True)
class StorageMetadata:
    """Derived, never persisted counts over a normalized entity set.

    Attributes:
        locations: Location counts.
        items: Item counts.
        recomputed: True when counted from entities, False when the server
            totals were the only source.
    """

    locations: LocationCounts = field(default_factory=LocationCounts)
    items: ItemCounts = field(default_factory=ItemCounts)
    recomputed: bool = True


_NON_LABEL_CHARS = re.compile(r"[^a-z0-9]+")


def make_label(name: str) -> str:
    """Derive a URL-safe label from a display name.

    ``"The Legend of Zelda: Tears of the Kingdom"`` becomes
    ``"the-legend-of-zelda-tears-of-the-kingdom"``.
    """
    ascii_name = (
        unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    )
    return _NON_LABEL_CHARS.sub("-", ascii_name.lower()).strip("-")

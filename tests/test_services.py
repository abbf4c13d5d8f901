"""
Tests for the storage services.

Each service call is driven through httpx.MockTransport so that URLs,
query params, request bodies and cache invalidation keys can be checked
together with the adapted result.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest

from conftest import BASE_URL, envelope
from storage_sync.application.storage import query_keys
from storage_sync.application.storage.digital_locations import DigitalLocationService
from storage_sync.application.storage.physical_locations import PhysicalLocationService
from storage_sync.application.storage.storage_analytics import StorageAnalyticsService
from storage_sync.domain.storage.entities import (
    BillingCycle,
    IconColor,
    PaymentMethod,
    PhysicalLocationType,
    SublocationType,
)
from storage_sync.domain.storage.errors import (
    ProtocolViolation,
    RemoteReportedFailure,
)
from storage_sync.interfaces.storage.schemas import (
    CreateDigitalLocationRequest,
    CreatePhysicalLocationRequest,
    CreateSublocationRequest,
    SubscriptionRequest,
    UpdateDigitalLocationRequest,
    UpdatePhysicalLocationRequest,
    UpdateSublocationRequest,
)


class Backend:
    """MockTransport handler returning one payload per request."""

    def __init__(self, data, status_code: int = 200) -> None:
        self.data = data
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=envelope(self.data))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


PHYSICAL_RECORD = {
    "physical_location_id": "p1",
    "name": "Home",
    "physical_location_type": "house",
    "bg_color": "blue",
}

SUBLOCATION_RECORD = {
    "sublocation_id": "s1",
    "sublocation_name": "Shelf A",
    "sublocation_type": "shelf",
    "parent_location_id": "p1",
    "parent_location_name": "Home",
    "parent_location_type": "house",
    "parent_location_bg_color": "blue",
    "stored_items": 3,
}

DIGITAL_RECORD = {
    "id": "d1",
    "name": "Game Pass",
    "location_type": "xbox",
    "is_active": True,
    "is_subscription": True,
    "billing_cycle": "monthly",
    "monthly_cost": "14.99",
    "payment_method": "visa",
}


# ══════════════════════════════════════════════════════════════════════
# Physical locations
# ══════════════════════════════════════════════════════════════════════


class TestPhysicalLocationService:
    """Fetchers and mutators for physical locations and sublocations."""

    @pytest.mark.asyncio
    async def test_fetch_page(self, make_transport):
        backend = Backend(
            {"physical_locations": [PHYSICAL_RECORD], "sublocations": [SUBLOCATION_RECORD]}
        )
        service = PhysicalLocationService(make_transport(backend))

        page = await service.fetch_page()

        assert str(backend.last.url) == f"{BASE_URL}/v1/locations/physical/bff"
        assert page.physical_locations[0].sublocations[0].id == "s1"
        assert page.metadata.items.total == 3

    @pytest.mark.asyncio
    async def test_list_and_get(self, make_transport):
        backend = Backend({"physical": [PHYSICAL_RECORD]})
        service = PhysicalLocationService(make_transport(backend))

        locations = await service.list_locations()
        assert [p.id for p in locations] == ["p1"]

        backend.data = {"physical": PHYSICAL_RECORD}
        location = await service.get_location("p1")
        assert backend.last.url.path == "/api/v1/locations/physical/p1"
        assert location.color is IconColor.BLUE

    @pytest.mark.asyncio
    async def test_create_location(self, make_transport):
        backend = Backend({"physical": PHYSICAL_RECORD})
        service = PhysicalLocationService(make_transport(backend))

        result = await service.create_location(
            CreatePhysicalLocationRequest(
                name="Home",
                location_type=PhysicalLocationType.HOUSE,
                bg_color=IconColor.BLUE,
            )
        )

        assert backend.last.method == "POST"
        assert backend.last_json() == {
            "name": "Home",
            "location_type": "house",
            "bg_color": "blue",
        }
        assert result.value.id == "p1"
        assert result.invalidate == (query_keys.PHYSICAL_ALL, query_keys.ANALYTICS)

    @pytest.mark.asyncio
    async def test_update_sends_only_set_fields(self, make_transport):
        backend = Backend({"physical": PHYSICAL_RECORD})
        service = PhysicalLocationService(make_transport(backend))

        result = await service.update_location(
            "p1", UpdatePhysicalLocationRequest(name="Home")
        )

        assert backend.last.method == "PUT"
        assert backend.last.url.path == "/api/v1/locations/physical/p1"
        assert backend.last_json() == {"name": "Home"}
        assert query_keys.physical_detail("p1") in result.invalidate

    @pytest.mark.asyncio
    async def test_delete_locations(self, make_transport):
        backend = Backend(
            {"physical": {"success": True, "deleted_count": 2, "location_ids": ["a", "b"]}}
        )
        service = PhysicalLocationService(make_transport(backend))

        result = await service.delete_locations(["a", "b"])

        assert backend.last.method == "DELETE"
        assert backend.last.url.params["ids"] == "a,b"
        assert result.value.deleted_count == 2
        assert result.value.deleted_ids == ("a", "b")

    @pytest.mark.asyncio
    async def test_delete_requires_ids(self, make_transport):
        backend = Backend({})
        service = PhysicalLocationService(make_transport(backend))

        with pytest.raises(ValueError):
            await service.delete_locations([])
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_list_sublocations(self, make_transport):
        backend = Backend({"sublocations": [SUBLOCATION_RECORD]})
        service = PhysicalLocationService(make_transport(backend))

        sublocations = await service.list_sublocations("p1")

        assert backend.last.url.path == "/api/v1/locations/physical/p1/sublocations"
        assert sublocations[0].parent_location_color is IconColor.BLUE
        assert sublocations[0].item_count == 3

    @pytest.mark.asyncio
    async def test_create_sublocation(self, make_transport):
        backend = Backend({"sublocation": SUBLOCATION_RECORD})
        service = PhysicalLocationService(make_transport(backend))

        result = await service.create_sublocation(
            CreateSublocationRequest(
                name="Shelf A",
                location_type=SublocationType.SHELF,
                physical_location_id="p1",
            )
        )

        assert backend.last.url.path == "/api/v1/locations/sublocations"
        assert backend.last_json() == {
            "name": "Shelf A",
            "location_type": "shelf",
            "physical_location_id": "p1",
            "stored_items": 0,
        }
        assert result.value.parent_location_name == "Home"
        assert result.invalidate == (
            query_keys.sublocation_detail("s1"),
            query_keys.physical_sublocations("p1"),
            query_keys.physical_detail("p1"),
            query_keys.PHYSICAL_ALL,
            query_keys.ANALYTICS,
        )

    @pytest.mark.asyncio
    async def test_update_sublocation(self, make_transport):
        backend = Backend({"sublocation": SUBLOCATION_RECORD})
        service = PhysicalLocationService(make_transport(backend))

        await service.update_sublocation("s1", UpdateSublocationRequest(stored_items=3))

        assert backend.last.url.path == "/api/v1/locations/sublocations/s1"
        assert backend.last_json() == {"stored_items": 3}

    @pytest.mark.asyncio
    async def test_delete_sublocations_without_parent(self, make_transport):
        backend = Backend({"sublocation": {"deleted_count": 1, "sublocation_ids": ["s1"]}})
        service = PhysicalLocationService(make_transport(backend))

        result = await service.delete_sublocations(["s1"])

        assert result.invalidate == (
            query_keys.sublocation_detail("s1"),
            query_keys.PHYSICAL_ALL,
            query_keys.ANALYTICS,
        )

    @pytest.mark.asyncio
    async def test_malformed_create_response(self, make_transport):
        service = PhysicalLocationService(make_transport(Backend({"physical": {}})))
        with pytest.raises(ProtocolViolation):
            await service.create_location(
                CreatePhysicalLocationRequest(
                    name="Home", location_type=PhysicalLocationType.HOUSE
                )
            )

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, make_transport):
        def handler(request):
            return httpx.Response(500, json={"success": False, "error": "db down"})

        service = PhysicalLocationService(make_transport(handler))
        with pytest.raises(RemoteReportedFailure, match="db down"):
            await service.fetch_page()


# ══════════════════════════════════════════════════════════════════════
# Digital locations
# ══════════════════════════════════════════════════════════════════════


class TestDigitalLocationService:
    """Fetchers and mutators for digital locations."""

    @pytest.mark.asyncio
    async def test_fetch_page(self, make_transport):
        backend = Backend({"digital_locations": [DIGITAL_RECORD]})
        service = DigitalLocationService(make_transport(backend))

        page = await service.fetch_page()

        assert backend.last.url.path == "/api/v1/locations/digital/bff"
        location = page.digital_locations[0]
        assert location.monthly_cost == Decimal("14.99")
        assert location.billing_cycle is BillingCycle.MONTHLY
        assert location.payment_method is PaymentMethod.VISA

    @pytest.mark.asyncio
    async def test_create_with_subscription(self, make_transport):
        backend = Backend({"digital": DIGITAL_RECORD})
        service = DigitalLocationService(make_transport(backend))

        result = await service.create_location(
            CreateDigitalLocationRequest(
                name="Game Pass",
                is_subscription=True,
                subscription=SubscriptionRequest(
                    billing_cycle=BillingCycle.MONTHLY,
                    cost_per_cycle=Decimal("14.99"),
                    next_payment_date=datetime(2024, 7, 1, tzinfo=timezone.utc),
                    payment_method=PaymentMethod.VISA,
                ),
            )
        )

        body = backend.last_json()
        assert body["is_subscription"] is True
        assert body["subscription"]["billing_cycle"] == "monthly"
        assert body["subscription"]["cost_per_cycle"] == "14.99"
        assert body["subscription"]["payment_method"] == "visa"
        assert result.invalidate == (query_keys.DIGITAL_ALL, query_keys.ANALYTICS)

    @pytest.mark.asyncio
    async def test_delete_locations(self, make_transport):
        backend = Backend({"digital": {"deleted_count": 1, "location_ids": ["d1"]}})
        service = DigitalLocationService(make_transport(backend))

        result = await service.delete_locations(["d1"])

        assert backend.last.url.params["ids"] == "d1"
        assert result.value.deleted_ids == ("d1",)

    @pytest.mark.asyncio
    async def test_update_invalidates_detail(self, make_transport):
        backend = Backend({"digital": DIGITAL_RECORD})
        service = DigitalLocationService(make_transport(backend))

        result = await service.update_location(
            "d1", UpdateDigitalLocationRequest(is_active=False)
        )

        assert backend.last_json() == {"is_active": False}
        assert result.invalidate[0] == query_keys.digital_detail("d1")


# ══════════════════════════════════════════════════════════════════════
# Analytics
# ══════════════════════════════════════════════════════════════════════


class TestStorageAnalyticsService:
    """Storage overview from the analytics endpoint."""

    @pytest.mark.asyncio
    async def test_fetch_overview(self, make_transport):
        backend = Backend(
            {
                "analytics": {
                    "storage": {
                        "total_physical_locations": 1,
                        "total_digital_locations": 1,
                        "physical_locations": [PHYSICAL_RECORD],
                        "digital_locations": [DIGITAL_RECORD],
                    }
                }
            }
        )
        service = StorageAnalyticsService(make_transport(backend))

        overview = await service.fetch_overview()

        assert backend.last.url.path == "/api/v1/analytics"
        assert backend.last.url.params["domains"] == "storage"
        assert overview.metadata.recomputed is True
        assert overview.metadata.locations.total == 2


# ══════════════════════════════════════════════════════════════════════
# Query keys
# ══════════════════════════════════════════════════════════════════════


class TestQueryKeys:
    """Prefix invalidation."""

    def test_physical_all_covers_nested_keys(self):
        assert query_keys.is_prefix(query_keys.PHYSICAL_ALL, query_keys.physical_detail("p1"))
        assert query_keys.is_prefix(
            query_keys.PHYSICAL_ALL, query_keys.physical_sublocations("p1")
        )
        assert not query_keys.is_prefix(query_keys.PHYSICAL_ALL, query_keys.digital_detail("d1"))

    def test_sublocation_keys_share_one_prefix(self):
        assert query_keys.is_prefix(
            query_keys.SUBLOCATIONS_ALL, query_keys.sublocation_detail("s1")
        )

    def test_keys_are_hashable_and_value_equal(self):
        assert {query_keys.physical_detail("p1")} == {("physical-locations", "detail", "p1")}

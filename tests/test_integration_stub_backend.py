"""
Integration tests against an in-process stub backend.

A small FastAPI app speaks the backend wire format (snake_case keys inside
a success envelope, bearer auth) and is mounted through httpx.ASGITransport.
The full path is exercised: credentials, the 401 refresh, transcoding,
envelope validation, adaptation and metadata.
"""

from typing import Any

import httpx
import pytest
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from conftest import FakeIdentity, RecordingSink
from storage_sync.application.storage.digital_locations import DigitalLocationService
from storage_sync.application.storage.physical_locations import PhysicalLocationService
from storage_sync.application.storage.storage_analytics import StorageAnalyticsService
from storage_sync.core.config import TransportConfig
from storage_sync.domain.storage.entities import (
    GamePlatform,
    IconColor,
    PhysicalLocationType,
)
from storage_sync.domain.storage.errors import AuthenticationExpired
from storage_sync.infrastructure.http.transport_client import TransportClient
from storage_sync.interfaces.storage.schemas import CreatePhysicalLocationRequest

STUB_BASE_URL = "http://stub.test/api"

PHYSICAL_LOCATIONS = [
    {
        "physical_location_id": "p1",
        "name": "Home",
        "physical_location_type": "house",
        "bg_color": "blue",
        "map_coordinates": {"coords": "40.7,-74.0", "google_maps_link": ""},
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "0001-01-01T00:00:00Z",
    }
]

SUBLOCATIONS = [
    {
        "sublocation_id": "s1",
        "sublocation_name": "Shelf A",
        "sublocation_type": "shelf",
        "parent_location_id": "p1",
        "stored_items": 2,
    },
    {
        "sublocation_id": "s2",
        "sublocation_name": "Garage Box",
        "sublocation_type": "box",
        "parent_location_id": "deleted-parent",
        "stored_items": 7,
    },
]

DIGITAL_LOCATIONS = [
    {
        "id": "d1",
        "name": "Steam",
        "location_type": "steam",
        "is_active": True,
        "items": [{"id": 7, "name": "Hades"}],
    },
    {
        "id": "d2",
        "name": "Some Store",
        "location_type": "unknown-vendor",
        "is_active": True,
    },
]


def _ok(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


def create_stub_backend(valid_token: str = "token-1") -> FastAPI:
    """Build a stub storage backend that accepts one bearer token."""
    app = FastAPI()
    app.state.seen = []

    @app.middleware("http")
    async def require_token(request: Request, call_next):
        app.state.seen.append(
            (request.method, request.url.path, request.headers.get("authorization"))
        )
        if request.headers.get("authorization") != f"Bearer {valid_token}":
            return JSONResponse(
                {"success": False, "error": "token expired"}, status_code=401
            )
        return await call_next(request)

    @app.get("/api/v1/locations/physical/bff")
    async def physical_bff():
        return _ok({"physical_locations": PHYSICAL_LOCATIONS, "sublocations": SUBLOCATIONS})

    @app.post("/api/v1/locations/physical")
    async def create_physical(payload: dict[str, Any]):
        app.state.last_body = payload
        return _ok(
            {
                "physical": {
                    "physical_location_id": "p-new",
                    "name": payload["name"],
                    "physical_location_type": payload["location_type"],
                    "bg_color": payload.get("bg_color"),
                }
            }
        )

    @app.delete("/api/v1/locations/physical")
    async def delete_physical(ids: str = Query(...)):
        deleted = ids.split(",")
        return _ok(
            {
                "physical": {
                    "success": True,
                    "deleted_count": len(deleted),
                    "location_ids": deleted,
                }
            }
        )

    @app.get("/api/v1/locations/digital/bff")
    async def digital_bff():
        return _ok({"digital_locations": DIGITAL_LOCATIONS})

    @app.get("/api/v1/analytics")
    async def analytics(domains: str = Query("")):
        if domains != "storage":
            return JSONResponse({"success": False, "error": "bad domain"}, status_code=400)
        return _ok(
            {
                "analytics": {
                    "storage": {
                        "total_physical_locations": 1,
                        "total_digital_locations": 2,
                    }
                }
            }
        )

    return app


@pytest.fixture
def stub_app() -> FastAPI:
    return create_stub_backend()


@pytest.fixture
def stub_transport(stub_app, identity, sink) -> TransportClient:
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=stub_app))
    return TransportClient(
        TransportConfig(base_url=STUB_BASE_URL, identity=identity, sink=sink),
        http_client=client,
    )


class TestStubBackendFlow:
    """End to end through the ASGI stub."""

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_once(self, stub_app, stub_transport, identity):
        page = await PhysicalLocationService(stub_transport).fetch_page()

        assert identity.refresh_calls == 1
        assert [auth for _, _, auth in stub_app.state.seen] == [
            "Bearer token-0",
            "Bearer token-1",
        ]
        assert [p.id for p in page.physical_locations] == ["p1"]

    @pytest.mark.asyncio
    async def test_physical_page_is_normalized(self, stub_transport, sink: RecordingSink):
        page = await PhysicalLocationService(stub_transport).fetch_page()

        home = page.physical_locations[0]
        assert home.location_type is PhysicalLocationType.HOUSE
        assert home.color is IconColor.BLUE
        assert home.map_coordinates.map_link is None
        assert home.updated_at is None
        assert [s.id for s in home.sublocations] == ["s1"]
        assert home.sublocations[0].parent_location_name == "Home"
        assert page.metadata.items.total == 2
        dropped = [
            kwargs["data"]["id"]
            for args, kwargs in sink.of("record_breadcrumb")
            if args[0] == "dropped sublocation"
        ]
        assert dropped == ["s2"]

    @pytest.mark.asyncio
    async def test_create_and_delete(self, stub_app, stub_transport):
        service = PhysicalLocationService(stub_transport)

        created = await service.create_location(
            CreatePhysicalLocationRequest(
                name="Office",
                location_type=PhysicalLocationType.OFFICE,
                bg_color=IconColor.GOLD,
            )
        )
        deleted = await service.delete_locations(["p-new", "p1"])

        assert stub_app.state.last_body == {
            "name": "Office",
            "location_type": "office",
            "bg_color": "gold",
        }
        assert created.value.id == "p-new"
        assert created.value.color is IconColor.GOLD
        assert deleted.value.deleted_ids == ("p-new", "p1")

    @pytest.mark.asyncio
    async def test_digital_page_with_unknown_vendor(self, stub_transport):
        page = await DigitalLocationService(stub_transport).fetch_page()

        platforms = {d.id: d.platform for d in page.digital_locations}
        assert platforms == {"d1": GamePlatform.STEAM, "d2": GamePlatform.STEAM}
        assert page.digital_locations[0].items[0].id == "7"
        assert page.metadata.items.digital == 1

    @pytest.mark.asyncio
    async def test_analytics_without_detail_uses_totals(self, stub_transport):
        overview = await StorageAnalyticsService(stub_transport).fetch_overview()

        assert overview.metadata.recomputed is False
        assert overview.metadata.locations.physical == 1
        assert overview.metadata.locations.digital == 2

    @pytest.mark.asyncio
    async def test_token_never_accepted(self, sink):
        app = create_stub_backend(valid_token="never-issued")
        transport = TransportClient(
            TransportConfig(base_url=STUB_BASE_URL, identity=FakeIdentity(), sink=sink),
            http_client=httpx.AsyncClient(transport=httpx.ASGITransport(app=app)),
        )

        with pytest.raises(AuthenticationExpired):
            await StorageAnalyticsService(transport).fetch_overview()

        assert len(app.state.seen) == 2

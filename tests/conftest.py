"""
Shared test doubles for the storage sync tests.

FakeIdentity and RecordingSink implement the domain ports in memory.
make_transport builds a TransportClient on top of httpx.MockTransport.
"""

from typing import Any, Callable, Optional

import httpx
import pytest

from storage_sync.core.config import TransportConfig
from storage_sync.domain.storage.errors import CredentialUnavailable
from storage_sync.domain.storage.ports import IdentityProvider, ObservabilitySink
from storage_sync.infrastructure.http.transport_client import TransportClient

BASE_URL = "https://api.example.test/api"


class FakeIdentity(IdentityProvider):
    """Identity collaborator issuing ``token-0``, ``token-1``, ... on refresh."""

    def __init__(
        self,
        *,
        available: bool = True,
        refresh_fails: bool = False,
    ) -> None:
        self.available = available
        self.refresh_fails = refresh_fails
        self.generation = 0
        self.get_calls = 0
        self.refresh_calls = 0

    async def get_credential(self) -> str:
        self.get_calls += 1
        if not self.available:
            raise CredentialUnavailable("signed out")
        return f"token-{self.generation}"

    async def refresh_credential(self) -> str:
        self.refresh_calls += 1
        if self.refresh_fails:
            raise CredentialUnavailable("refresh rejected")
        self.generation += 1
        return f"token-{self.generation}"


class RecordingSink(ObservabilitySink):
    """Sink that keeps every event as ``(name, args, kwargs)``."""

    def __init__(self) -> None:
        self.events: list[tuple[str, tuple, dict]] = []

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]

    def of(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for n, args, kwargs in self.events if n == name]

    def record_request_error(self, error, **kwargs) -> None:
        self.events.append(("record_request_error", (error,), kwargs))

    def record_auth_error(self, error, **kwargs) -> None:
        self.events.append(("record_auth_error", (error,), kwargs))

    def record_breadcrumb(self, message, **kwargs) -> None:
        self.events.append(("record_breadcrumb", (message,), kwargs))

    def record_success(self, **kwargs) -> None:
        self.events.append(("record_success", (), kwargs))

    def record_slow_response(self, **kwargs) -> None:
        self.events.append(("record_slow_response", (), kwargs))


def envelope(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_transport(
    identity: FakeIdentity, sink: RecordingSink
) -> Callable[..., TransportClient]:
    """Factory: ``make_transport(handler, **config_overrides)``."""

    def _make(
        handler: Callable[[httpx.Request], Any],
        *,
        identity_override: Optional[IdentityProvider] = None,
        **overrides: Any,
    ) -> TransportClient:
        config = TransportConfig(
            base_url=overrides.pop("base_url", BASE_URL),
            identity=identity_override or identity,
            sink=overrides.pop("sink", sink),
            **overrides,
        )
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return TransportClient(config, http_client=client)

    return _make

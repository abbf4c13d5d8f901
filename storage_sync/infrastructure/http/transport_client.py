"""
Adapter: authenticated HTTP transport for the storage backend.

One logical operation is one outbound call plus at most one transparent
credential refresh and resend, triggered only by a 401. Request bodies
are converted to wire casing, responses are envelope-checked and only the
unwrapped ``data`` is converted back to internal casing.

Telemetry is best-effort: a failing sink is logged and ignored.
"""

import asyncio
import logging
import time
from typing import Any, Optional

import httpx

from storage_sync.core.config import TransportConfig
from storage_sync.domain.storage.errors import (
    AuthenticationExpired,
    CredentialUnavailable,
    NetworkUnreachable,
    ProtocolViolation,
    RemoteReportedFailure,
    StorageSyncError,
    Timeout,
)
from storage_sync.infrastructure.http.case_transcoder import to_internal, to_wire
from storage_sync.infrastructure.http.envelope import envelope_error, unwrap_envelope
from storage_sync.infrastructure.telemetry.logging_sink import NullObservabilitySink

logger = logging.getLogger(__name__)

HTTP_401 = 401


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class TransportClient:
    """HTTP client with bearer credentials and retry-once-on-401.

    Instances are built explicitly from a TransportConfig; there is no
    shared module-level client. The retried flag lives in each call, so
    concurrent requests never share retry state.

    Args:
        config: Base URL, timeout, identity provider and telemetry sink.
        http_client: Optional pre-built ``httpx.AsyncClient`` (tests inject
            one with a mock transport). The caller keeps ownership of it.
    """

    def __init__(
        self,
        config: TransportConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._identity = config.identity
        self._sink = config.sink or NullObservabilitySink()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_seconds
        )

    @property
    def config(self) -> TransportConfig:
        return self._config

    async def __aenter__(self) -> "TransportClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Public verbs
    # ------------------------------------------------------------------

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, body=body, **kwargs)

    async def put(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return await self.request("PUT", path, body=body, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Perform one logical request and return the unwrapped data.

        Args:
            method: HTTP verb.
            path: Path relative to the configured base URL.
            body: Dict or list (sent as wire-cased JSON), or str/bytes
                (sent unmodified). None sends no body.
            params: Query parameters, sent as given.
            headers: Per-call header overrides.

        Returns:
            The envelope's ``data`` with keys in internal casing.

        Raises:
            Timeout: The request exceeded the configured timeout.
            NetworkUnreachable: The backend could not be reached.
            ProtocolViolation: The body is not a valid envelope.
            RemoteReportedFailure: The server reported a failure or
                answered with a non-2xx status other than 401.
            AuthenticationExpired: The resend after refresh was still 401.
            CredentialUnavailable: The credential refresh failed.
        """
        method = method.upper()
        url = self._url(path)
        body_kwargs = self._encode_body(body)
        start = time.monotonic()

        self._emit(
            "record_breadcrumb",
            f"{method} {path}",
            category="api",
            data={"method": method, "endpoint": path},
        )

        credential = await self._current_credential()
        response = await self._send(
            method, url, path, body_kwargs, params, headers, credential, start
        )

        if response.status_code == HTTP_401:
            logger.info("401 from %s %s, refreshing credential", method, path)
            credential = await self._refreshed_credential(method, path)
            response = await self._send(
                method, url, path, body_kwargs, params, headers, credential, start
            )
            if response.status_code == HTTP_401:
                error = AuthenticationExpired(path)
                self._emit(
                    "record_auth_error",
                    error,
                    endpoint=path,
                    method=method,
                    status_code=HTTP_401,
                )
                logger.warning("Still unauthorized after refresh: %s %s", method, path)
                raise error

        return self._handle_response(response, method, path, start)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    @staticmethod
    def _encode_body(body: Any) -> dict[str, Any]:
        if body is None:
            return {}
        if isinstance(body, (bytes, str)):
            return {"content": body}
        if isinstance(body, (dict, list, tuple)):
            return {"json": to_wire(body)}
        raise TypeError(f"Unsupported request body type: {type(body).__name__}")

    async def _current_credential(self) -> Optional[str]:
        if self._identity is None:
            return None
        try:
            return await self._identity.get_credential()
        except CredentialUnavailable:
            logger.debug("No credential available, sending unauthenticated")
            return None

    async def _refreshed_credential(self, method: str, path: str) -> str:
        self._emit(
            "record_breadcrumb",
            "credential refresh",
            category="auth",
            data={"method": method, "endpoint": path},
        )
        try:
            if self._identity is None:
                raise CredentialUnavailable("no identity provider configured")
            return await self._identity.refresh_credential()
        except CredentialUnavailable as exc:
            self._emit(
                "record_auth_error",
                exc,
                endpoint=path,
                method=method,
                status_code=HTTP_401,
            )
            logger.warning("Credential refresh failed for %s %s", method, path)
            raise

    def _build_headers(
        self, overrides: Optional[dict[str, str]], credential: Optional[str]
    ) -> dict[str, str]:
        headers = {"Accept": "application/json", **self._config.default_headers}
        if overrides:
            headers.update(overrides)
        if credential:
            headers["Authorization"] = f"Bearer {credential}"
        return headers

    async def _send(
        self,
        method: str,
        url: str,
        path: str,
        body_kwargs: dict[str, Any],
        params: Optional[dict[str, Any]],
        headers: Optional[dict[str, str]],
        credential: Optional[str],
        start: float,
    ) -> httpx.Response:
        try:
            return await asyncio.wait_for(
                self._client.request(
                    method,
                    url,
                    params=params,
                    headers=self._build_headers(headers, credential),
                    timeout=self._config.timeout_seconds,
                    **body_kwargs,
                ),
                self._config.timeout_seconds,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            error: StorageSyncError = Timeout(path, self._config.timeout_seconds)
            self._record_failure(error, method, path, None, start)
            raise error from exc
        except httpx.TransportError as exc:
            error = NetworkUnreachable(path, str(exc) or type(exc).__name__)
            self._record_failure(error, method, path, None, start)
            raise error from exc

    def _handle_response(
        self, response: httpx.Response, method: str, path: str, start: float
    ) -> Any:
        status = response.status_code
        payload = self._decode(response)

        if not _is_success(status):
            error = RemoteReportedFailure(
                envelope_error(payload) or f"HTTP {status}", status
            )
            self._record_failure(error, method, path, status, start)
            raise error

        try:
            if payload is None:
                raise ProtocolViolation("body is not valid JSON", status)
            data = unwrap_envelope(payload, status)
        except StorageSyncError as error:
            self._record_failure(error, method, path, status, start)
            raise

        duration_ms = _elapsed_ms(start)
        self._emit(
            "record_success",
            endpoint=path,
            method=method,
            status_code=status,
            duration_ms=duration_ms,
        )
        if duration_ms > self._config.slow_response_threshold_ms:
            self._emit(
                "record_slow_response",
                endpoint=path,
                method=method,
                duration_ms=duration_ms,
                threshold_ms=self._config.slow_response_threshold_ms,
            )
        logger.debug("%s %s -> %d in %.1fms", method, path, status, duration_ms)
        return to_internal(data)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decoded JSON body, or None when the body is empty or not JSON."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def _record_failure(
        self,
        error: StorageSyncError,
        method: str,
        path: str,
        status_code: Optional[int],
        start: float,
    ) -> None:
        logger.warning("%s %s failed: %s", method, path, type(error).__name__)
        self._emit(
            "record_request_error",
            error,
            endpoint=path,
            method=method,
            status_code=status_code,
            duration_ms=_elapsed_ms(start),
        )

    def _emit(self, event: str, *args: Any, **kwargs: Any) -> None:
        try:
            getattr(self._sink, event)(*args, **kwargs)
        except Exception as exc:
            logger.warning("Observability sink %s failed: %s", event, exc)


def _elapsed_ms(start: float) -> float:
    return (time.monotonic() - start) * 1000

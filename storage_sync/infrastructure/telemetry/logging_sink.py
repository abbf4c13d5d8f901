"""
Adapter: observability over stdlib logging.

Implements ObservabilitySink.
LoggingObservabilitySink turns telemetry events into log records so a host
application without an error-tracking service still sees API failures and
slow calls. NullObservabilitySink discards everything and is the default.
"""

import logging
from typing import Any, Optional

from storage_sync.domain.storage.ports import ObservabilitySink
from storage_sync.shared.logging import TELEMETRY_LOGGER


class NullObservabilitySink(ObservabilitySink):
    """Sink that drops every event."""

    def record_request_error(
        self,
        error: Exception,
        *,
        endpoint: str,
        method: str,
        status_code: Optional[int] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        pass

    def record_auth_error(
        self,
        error: Exception,
        *,
        endpoint: str,
        method: str,
        status_code: Optional[int] = None,
    ) -> None:
        pass

    def record_breadcrumb(
        self,
        message: str,
        *,
        category: str = "api",
        data: Optional[dict[str, Any]] = None,
    ) -> None:
        pass

    def record_success(
        self, *, endpoint: str, method: str, status_code: int, duration_ms: float
    ) -> None:
        pass

    def record_slow_response(
        self, *, endpoint: str, method: str, duration_ms: float, threshold_ms: float
    ) -> None:
        pass


class LoggingObservabilitySink(ObservabilitySink):
    """Sink that writes events to a logger.

    Only endpoints, methods, statuses and timings are logged. Request
    bodies and credentials never reach this sink.

    Args:
        logger: Target logger. Defaults to ``storage_sync.telemetry``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(TELEMETRY_LOGGER)

    def record_request_error(
        self,
        error: Exception,
        *,
        endpoint: str,
        method: str,
        status_code: Optional[int] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        self._logger.error(
            "API error %s %s (status=%s, duration=%sms): %s: %s",
            method,
            endpoint,
            status_code,
            _round(duration_ms),
            type(error).__name__,
            error,
        )

    def record_auth_error(
        self,
        error: Exception,
        *,
        endpoint: str,
        method: str,
        status_code: Optional[int] = None,
    ) -> None:
        self._logger.warning(
            "Auth error %s %s (status=%s): %s",
            method,
            endpoint,
            status_code,
            type(error).__name__,
        )

    def record_breadcrumb(
        self,
        message: str,
        *,
        category: str = "api",
        data: Optional[dict[str, Any]] = None,
    ) -> None:
        self._logger.debug("[%s] %s %s", category, message, data or {})

    def record_success(
        self, *, endpoint: str, method: str, status_code: int, duration_ms: float
    ) -> None:
        self._logger.info(
            "API %s %s -> %d in %sms",
            method,
            endpoint,
            status_code,
            _round(duration_ms),
        )

    def record_slow_response(
        self, *, endpoint: str, method: str, duration_ms: float, threshold_ms: float
    ) -> None:
        self._logger.warning(
            "Slow API response %s %s: %sms (threshold %sms)",
            method,
            endpoint,
            _round(duration_ms),
            _round(threshold_ms),
        )


def _round(value: Optional[float]) -> Optional[float]:
    return round(value, 2) if value is not None else None

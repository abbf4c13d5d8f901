"""
Adapter: single-flight credential refresh.

Wraps an IdentityProvider so that concurrent ``refresh_credential`` calls
share one in-flight refresh. N requests that hit a 401 at the same time
cause one refresh instead of N. Opt-in through
``Settings.coordinate_credential_refresh``.
"""

import asyncio
import logging
from typing import Optional

from storage_sync.domain.storage.ports import IdentityProvider

logger = logging.getLogger(__name__)


class SingleFlightRefresher(IdentityProvider):
    """IdentityProvider decorator collapsing concurrent refreshes.

    The shared task is cleared once it settles, so a later 401 starts a
    fresh refresh. A failed refresh propagates the same exception to every
    waiter.
    """

    def __init__(self, inner: IdentityProvider) -> None:
        self._inner = inner
        self._in_flight: Optional[asyncio.Task[str]] = None

    async def get_credential(self) -> str:
        return await self._inner.get_credential()

    async def refresh_credential(self) -> str:
        task = self._in_flight
        if task is None:
            task = asyncio.ensure_future(self._inner.refresh_credential())
            task.add_done_callback(self._clear)
            self._in_flight = task
        else:
            logger.debug("Joining in-flight credential refresh")
        return await asyncio.shield(task)

    def _clear(self, task: "asyncio.Task[str]") -> None:
        if self._in_flight is task:
            self._in_flight = None
        if not task.cancelled():
            task.exception()  # mark retrieved

"""
Store connection handling.

Holds the single active store adapter and exposes an explicit `connected`
capability check.
"""

import logging
from typing import Optional

from docsql.core.exceptions import NotConnectedError
from docsql.core.interfaces import StoreAdapter

logger = logging.getLogger(__name__)


class StoreSession:
    """
    The current store connection.

    Reconfiguring replaces the adapter; the previous one is closed first.
    """

    def __init__(self, adapter: Optional[StoreAdapter] = None):
        self._adapter = adapter

    @property
    def connected(self) -> bool:
        return self._adapter is not None and self._adapter.connected

    @property
    def adapter(self) -> StoreAdapter:
        """
        The live adapter.

        Raises:
            NotConnectedError: If no adapter is connected
        """
        if not self.connected:
            raise NotConnectedError()
        return self._adapter

    async def connect(self, adapter: StoreAdapter) -> None:
        """Replace the current adapter with `adapter`."""
        await self.disconnect()
        self._adapter = adapter
        logger.info("Store session connected (%s)", type(adapter).__name__)

    async def disconnect(self) -> None:
        if self._adapter is None:
            return
        adapter, self._adapter = self._adapter, None
        await adapter.close()
        logger.info("Store session closed (%s)", type(adapter).__name__)

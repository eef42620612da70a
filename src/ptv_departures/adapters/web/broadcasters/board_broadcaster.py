"""Broadcaster pushing board changes over WebSockets."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ptv_departures.adapters.web.formatters import append_message, refresh_message
from ptv_departures.domain.contracts.board_broadcaster import BoardBroadcasterProtocol

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

    from ptv_departures.adapters.web.broadcasters.connection_manager import ConnectionManager
    from ptv_departures.domain.models.departure import Departure

logger = logging.getLogger(__name__)


class BoardBroadcaster(BoardBroadcasterProtocol):
    """Sends refresh and append commands to connected display clients."""

    def __init__(self, connections: ConnectionManager, send_timeout_seconds: float = 5) -> None:
        """Initialize the broadcaster.

        Args:
            connections: Registry of connected clients.
            send_timeout_seconds: Time allowed for one client to accept a message.
        """
        self.connections = connections
        self.send_timeout_seconds = send_timeout_seconds

    async def broadcast_refresh(self) -> None:
        """Tell every connected client to reload its full state."""
        clients = self.connections.all_clients()
        await self._send_all(clients, refresh_message())
        logger.info(f"Broadcasted refresh to {len(clients)} client(s)")

    async def broadcast_append(self, platform: str, departure: Departure) -> None:
        """Send a newly enriched departure to the clients of one platform."""
        clients = self.connections.clients_for(platform)
        await self._send_all(clients, append_message(departure))
        logger.debug(f"Broadcasted run {departure.run} to {len(clients)} client(s) on {platform}")

    async def _send_all(self, clients: list[WebSocket], message: dict[str, Any]) -> None:
        """Send to all clients concurrently so a slow one cannot hold up the rest."""
        await asyncio.gather(*(self._send(client, message) for client in clients))

    async def _send(self, client: WebSocket, message: dict[str, Any]) -> None:
        try:
            await asyncio.wait_for(client.send_json(message), timeout=self.send_timeout_seconds)
        except Exception as e:
            logger.warning(f"Dropping display client after failed send: {e!r}")
            self.connections.unregister(client)

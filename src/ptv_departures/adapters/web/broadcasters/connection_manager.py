"""Registry of connected display clients."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks which platform each connected WebSocket listens to."""

    def __init__(self) -> None:
        self._platforms: dict[WebSocket, str] = {}

    def register(self, websocket: WebSocket, platform: str) -> None:
        """Register a client for a platform."""
        self._platforms[websocket] = platform
        logger.info(
            f"Client connected, listening to platform {platform} "
            f"({len(self._platforms)} client(s) connected)"
        )

    def unregister(self, websocket: WebSocket) -> None:
        """Forget a client."""
        platform = self._platforms.pop(websocket, None)
        if platform is not None:
            logger.info(
                f"Client disconnected from platform {platform} "
                f"({len(self._platforms)} client(s) connected)"
            )

    def all_clients(self) -> list[WebSocket]:
        """Return every connected client."""
        return list(self._platforms)

    def clients_for(self, platform: str) -> list[WebSocket]:
        """Return the clients listening to one platform."""
        return [ws for ws, plat in self._platforms.items() if plat == platform]

    def __len__(self) -> int:
        return len(self._platforms)

"""Protocol for pushing board changes to display clients."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ptv_departures.domain.models.departure import Departure


class BoardBroadcasterProtocol(Protocol):
    """Protocol for notifying connected display clients."""

    async def broadcast_refresh(self) -> None:
        """Tell every connected client to reload its full state."""
        ...

    async def broadcast_append(self, platform: str, departure: "Departure") -> None:
        """Send a newly enriched departure to the clients of one platform.

        Args:
            platform: The platform the departure belongs to.
            departure: The enriched departure.
        """
        ...

"""Broadcasters for pushing updates to display clients."""

from ptv_departures.adapters.web.broadcasters.board_broadcaster import BoardBroadcaster
from ptv_departures.adapters.web.broadcasters.connection_manager import ConnectionManager

__all__ = ["BoardBroadcaster", "ConnectionManager"]

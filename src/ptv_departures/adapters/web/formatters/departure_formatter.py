"""Serialization of departures for display clients."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ptv_departures.domain.models.departure import Departure


def format_departure(departure: Departure) -> dict[str, Any]:
    """Serialize a departure to the JSON shape the display expects.

    ``time`` is given in epoch milliseconds. ``dest``, ``subtitle`` and
    ``stations`` are null until the departure has been enriched.
    """
    stations = None
    if departure.stations is not None:
        stations = [
            {"id": stop.id, "name": stop.name, "skipped": stop.skipped}
            for stop in departure.stations
        ]
    return {
        "type": departure.type,
        "run": departure.run,
        "time": int(departure.time.timestamp() * 1000),
        "dest": departure.dest,
        "subtitle": departure.subtitle,
        "group": departure.group,
        "stations": stations,
    }


def refresh_message() -> dict[str, Any]:
    """Message telling a client to refetch its full state."""
    return {"command": "refresh"}


def append_message(departure: Departure) -> dict[str, Any]:
    """Message carrying a newly enriched departure."""
    return {"command": "append", "data": format_departure(departure)}

"""Resolution of the configured station into a station id."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ptv_departures.domain.errors import StationNotFoundError
from ptv_departures.domain.models.station import Station

if TYPE_CHECKING:
    from ptv_departures.domain.ports import TimetableRepository

logger = logging.getLogger(__name__)


async def resolve_station(
    repository: TimetableRepository, station: str, route_type: int = 0
) -> Station:
    """Turn a station id or a search term into a station.

    Numeric values are used as the station id directly; anything else is
    searched for and the first match wins.

    Raises:
        StationNotFoundError: If the search finds no station.
    """
    station = station.strip()
    if station.isdigit():
        logger.info(f"Targeting station with ID {station}.")
        return Station(id=int(station), name=station)

    logger.info(f"Targeting station with name/search term '{station}'.")
    results = await repository.search_stations(station, route_type)
    if not results:
        raise StationNotFoundError(f"Cannot find any station matching '{station}'")

    found = results[0]
    logger.info(f"Targeting station with ID {found.id} ({found.name}, {found.suburb}).")
    return found

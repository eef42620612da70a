"""Timetable repository port."""

from typing import Protocol

from ptv_departures.domain.models.station import Station
from ptv_departures.domain.models.timetable import DeparturesResponse, PatternResponse


class TimetableRepository(Protocol):
    """Port for retrieving timetable data from the upstream API."""

    async def get_departures(self, station_id: int, route_type: int) -> DeparturesResponse:
        """Get all departures for a station, with their runs and routes."""
        ...

    async def get_pattern(self, route_type: int, run_ref: str) -> PatternResponse:
        """Get the full stopping pattern of a run, including skipped stops."""
        ...

    async def search_stations(self, term: str, route_type: int) -> list[Station]:
        """Search for stations matching a free-text term."""
        ...

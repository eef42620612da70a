"""Fetches a run's stopping pattern and trims it to the home station."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ptv_departures.application.services.stop_names import served_stop_name, skipped_stop_name
from ptv_departures.domain.errors import TimetableApiError
from ptv_departures.domain.models.fetched_pattern import FetchedPattern
from ptv_departures.domain.models.stop import Stop

if TYPE_CHECKING:
    from ptv_departures.domain.ports import TimetableRepository

logger = logging.getLogger(__name__)


class PatternFetcher:
    """Retrieves stopping patterns relative to the home station."""

    def __init__(self, repository: TimetableRepository, station_id: int) -> None:
        """Initialize the fetcher.

        Args:
            repository: Upstream timetable repository.
            station_id: Id of the station the board is built for.
        """
        self._repository = repository
        self.station_id = station_id

    async def fetch(self, route_type: int, run_ref: str, save_all: bool = False) -> FetchedPattern:
        """Fetch the stopping pattern of a run.

        With ``save_all`` unset, stops before the home station are dropped and
        the home station itself is left out; the stops it skips on the way to
        the next served stop are kept. With ``save_all`` set, the whole
        pattern is kept from its first stop.

        Raises:
            TimetableApiError: If the pattern cannot be fetched or lacks the run.
        """
        response = await self._repository.get_pattern(route_type, run_ref)

        run = response.runs.get(str(run_ref))
        if run is None:
            raise TimetableApiError(f"Pattern for run {run_ref} carries no run metadata")

        stations: list[Stop] = []
        note = ""
        saving = save_all
        for pattern_stop in response.stops:
            at_home = False
            if not saving:
                if pattern_stop.stop_id != self.station_id:
                    continue
                saving = True
                at_home = True
                note = pattern_stop.departure_note or ""

            if not at_home:
                name = response.stop_names.get(pattern_stop.stop_id, "")
                stations.append(Stop(id=pattern_stop.stop_id, name=served_stop_name(name)))
            for skipped in pattern_stop.skipped_stops:
                stations.append(
                    Stop(id=skipped.stop_id, name=skipped_stop_name(skipped.stop_name), skipped=True)
                )

        if not saving:
            logger.warning(f"Run {run_ref} does not call at station {self.station_id}")

        return FetchedPattern(stations=tuple(stations), note=note, run=run)

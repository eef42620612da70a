"""Resolves the rider-facing destination and stop list of a departure."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ptv_departures.application.services.stop_names import fit_destination
from ptv_departures.domain.errors import TimetableApiError

if TYPE_CHECKING:
    from ptv_departures.application.services.pattern_fetcher import PatternFetcher
    from ptv_departures.application.services.route_colour_map import RouteColourMap
    from ptv_departures.domain.models.departure import Departure
    from ptv_departures.domain.models.fetched_pattern import FetchedPattern
    from ptv_departures.domain.models.network_configuration import NetworkConfiguration
    from ptv_departures.domain.models.stop import Stop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedDestination:
    """Destination and stop list as shown to riders."""

    dest: str
    stations: tuple[Stop, ...]


class DestinationResolver:
    """Applies the CBD extension and City Loop rules to a fetched pattern."""

    def __init__(
        self,
        network: NetworkConfiguration,
        station_id: int,
        pattern_fetcher: PatternFetcher,
        max_extension_depth: int = 1,
    ) -> None:
        """Initialize the resolver.

        Args:
            network: CBD station ids, terminal ids and group tags.
            station_id: Id of the home station.
            pattern_fetcher: Fetcher used to follow distributor runs.
            max_extension_depth: How many distributor runs may be chained.
        """
        self.network = network
        self.station_id = station_id
        self.pattern_fetcher = pattern_fetcher
        self.max_extension_depth = max_extension_depth
        self.home_is_cbd = network.is_cbd_station(station_id)

    async def resolve(
        self,
        departure: Departure,
        pattern: FetchedPattern,
        colour_map: RouteColourMap,
    ) -> ResolvedDestination:
        """Work out where a departure really goes.

        Args:
            departure: The departure being enriched.
            pattern: Its own stopping pattern from the home station.
            colour_map: Route to service-group lookup of the current board.
        """
        network = self.network
        dest = pattern.run.destination_name
        stations = list(pattern.stations)
        final_stop_id = pattern.run.final_stop_id

        run = pattern.run
        depth = 0
        while (
            depth < self.max_extension_depth
            and network.is_cbd_station(final_stop_id)
            and (self.home_is_cbd or departure.group == network.cross_city_group)
            and run.distributor is not None
        ):
            distributor = run.distributor
            try:
                extension = await self.pattern_fetcher.fetch(
                    departure.type, distributor.run_ref, save_all=True
                )
            except TimetableApiError as e:
                logger.warning(
                    f"Could not follow run {departure.run} into distributor run "
                    f"{distributor.run_ref}: {e}"
                )
                break

            dest = distributor.destination_name
            if colour_map.group_for(extension.run.route_id) == departure.group:
                for index, stop in enumerate(extension.stations):
                    if stop.id == final_stop_id:
                        stations.extend(extension.stations[index + 1 :])
                        break
            if stations:
                final_stop_id = stations[-1].id
            logger.debug(
                f"Service {departure.run} extended to {dest} using run {distributor.run_ref}, "
                f"now {len(stations)} stop(s)"
            )
            run = extension.run
            depth += 1

        if (
            not self.home_is_cbd
            and network.is_cbd_station(final_stop_id)
            and final_stop_id != network.city_terminal_id
        ):
            for index in range(len(stations) - 1, -1, -1):
                if stations[index].id == network.city_terminal_id:
                    dest = stations[index].name
                    stations = stations[: index + 1]
                    break

        if stations and stations[-1].id == network.city_terminal_id:
            previous_id = stations[-2].id if len(stations) > 1 else self.station_id
            if previous_id != network.terminal_interchange_id:
                dest = network.loop_label

        return ResolvedDestination(dest=fit_destination(dest), stations=tuple(stations))

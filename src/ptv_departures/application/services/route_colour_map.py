"""Route identifier to service-group lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ptv_departures.domain.models.network_configuration import NetworkConfiguration
    from ptv_departures.domain.models.timetable import RouteInfo

logger = logging.getLogger(__name__)

# GTFS route ids carry a two character mode prefix, e.g. "2-ALM"
GTFS_PREFIX_LENGTH = 2


class RouteColourMap:
    """Maps route ids to the service group used to colour a departure."""

    def __init__(self, groups: dict[int, str] | None = None) -> None:
        self._groups: dict[int, str] = dict(groups or {})

    @classmethod
    def build(cls, routes: Iterable[RouteInfo], network: NetworkConfiguration) -> RouteColourMap:
        """Build the lookup from the routes listed in a departures response.

        Args:
            routes: Routes from the departures response.
            network: Network configuration holding the static line table.
        """
        groups: dict[int, str] = {}
        for route in routes:
            if route.route_type != network.metro_route_type:
                group = network.regional_group
            elif not route.route_gtfs_id:
                group = network.special_group
            else:
                line_code = route.route_gtfs_id[GTFS_PREFIX_LENGTH:]
                group = network.line_groups.get(line_code, network.special_group)
            groups[route.route_id] = group
            logger.debug(
                f"Route {route.route_id} ({route.route_name} {route.route_gtfs_id}) -> {group}"
            )
        return cls(groups)

    def group_for(self, route_id: int) -> str | None:
        """Return the service group of a route, or None if the route is unknown."""
        return self._groups.get(route_id)

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._groups

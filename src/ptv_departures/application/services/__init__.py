"""Application services (use cases) for the departure board."""

from ptv_departures.application.services.board_manager import BoardManager
from ptv_departures.application.services.departure_enrichment_service import (
    DepartureEnrichmentService,
)
from ptv_departures.application.services.destination_resolver import (
    DestinationResolver,
    ResolvedDestination,
)
from ptv_departures.application.services.pattern_classifier import classify_pattern
from ptv_departures.application.services.pattern_fetcher import PatternFetcher
from ptv_departures.application.services.route_colour_map import RouteColourMap
from ptv_departures.application.services.station_lookup import resolve_station

__all__ = [
    "BoardManager",
    "DepartureEnrichmentService",
    "DestinationResolver",
    "PatternFetcher",
    "ResolvedDestination",
    "RouteColourMap",
    "classify_pattern",
    "resolve_station",
]

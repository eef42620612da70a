"""Domain models for the PTV departure board."""

from ptv_departures.domain.models.board_settings import BoardSettings
from ptv_departures.domain.models.board_state import BoardState
from ptv_departures.domain.models.departure import Departure
from ptv_departures.domain.models.fetched_pattern import FetchedPattern
from ptv_departures.domain.models.network_configuration import NetworkConfiguration
from ptv_departures.domain.models.run_metadata import Distributor, RunMetadata
from ptv_departures.domain.models.station import Station
from ptv_departures.domain.models.stop import Stop
from ptv_departures.domain.models.timetable import (
    DeparturesResponse,
    PatternResponse,
    PatternStop,
    RouteInfo,
    SkippedStop,
    TimetableDeparture,
)

__all__ = [
    "BoardSettings",
    "BoardState",
    "Departure",
    "DeparturesResponse",
    "Distributor",
    "FetchedPattern",
    "NetworkConfiguration",
    "PatternResponse",
    "PatternStop",
    "RouteInfo",
    "RunMetadata",
    "SkippedStop",
    "Station",
    "Stop",
    "TimetableDeparture",
]

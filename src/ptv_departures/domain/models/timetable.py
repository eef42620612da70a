"""Upstream timetable records, parsed into plain domain objects."""

from dataclasses import dataclass, field
from datetime import datetime

from ptv_departures.domain.models.run_metadata import RunMetadata


@dataclass(frozen=True)
class RouteInfo:
    """A route listed in a departures response."""

    route_id: int
    route_type: int
    route_name: str = ""
    route_gtfs_id: str | None = None


@dataclass(frozen=True)
class TimetableDeparture:
    """A single scheduled departure as reported upstream."""

    run_ref: str
    route_id: int
    platform_number: str | None
    scheduled_departure: datetime


@dataclass(frozen=True)
class DeparturesResponse:
    """All departures for a stop together with their runs and routes."""

    departures: list[TimetableDeparture]
    runs: dict[str, RunMetadata] = field(default_factory=dict)
    routes: dict[int, RouteInfo] = field(default_factory=dict)


@dataclass(frozen=True)
class SkippedStop:
    """A stop passed through without stopping."""

    stop_id: int
    stop_name: str


@dataclass(frozen=True)
class PatternStop:
    """One served stop in a run's stopping pattern."""

    stop_id: int
    departure_note: str | None = None
    skipped_stops: list[SkippedStop] = field(default_factory=list)


@dataclass(frozen=True)
class PatternResponse:
    """The full stopping pattern of a run."""

    stops: list[PatternStop]
    stop_names: dict[int, str] = field(default_factory=dict)
    runs: dict[str, RunMetadata] = field(default_factory=dict)

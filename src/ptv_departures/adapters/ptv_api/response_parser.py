"""Parsers turning PTV timetable API JSON into domain objects."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from ptv_departures.domain.models.run_metadata import Distributor, RunMetadata
from ptv_departures.domain.models.station import Station
from ptv_departures.domain.models.timetable import (
    DeparturesResponse,
    PatternResponse,
    PatternStop,
    RouteInfo,
    SkippedStop,
    TimetableDeparture,
)

logger = logging.getLogger(__name__)


def _parse_time(value: str) -> datetime:
    """Parse an ISO 8601 UTC timestamp such as "2024-05-01T09:30:00Z"."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_distributor(run: dict[str, Any]) -> Distributor | None:
    """Extract the distributor run from a run's interchange data, if any."""
    interchange = run.get("interchange")
    if not isinstance(interchange, dict):
        return None
    distributor = interchange.get("distributor")
    if not isinstance(distributor, dict) or distributor.get("run_ref") is None:
        return None
    return Distributor(
        run_ref=str(distributor["run_ref"]),
        destination_name=distributor.get("destination_name") or "",
    )


def parse_run(run_ref: str, run: dict[str, Any]) -> RunMetadata:
    """Parse one entry of a response's ``runs`` dictionary."""
    return RunMetadata(
        run_ref=str(run.get("run_ref", run_ref)),
        route_id=int(run.get("route_id", 0)),
        route_type=int(run.get("route_type", 0)),
        final_stop_id=int(run.get("final_stop_id", 0)),
        destination_name=run.get("destination_name") or "",
        distributor=_parse_distributor(run),
    )


def _parse_runs(data: dict[str, Any]) -> dict[str, RunMetadata]:
    runs = data.get("runs") or {}
    return {
        str(ref): parse_run(str(ref), run) for ref, run in runs.items() if isinstance(run, dict)
    }


def parse_departures(data: dict[str, Any]) -> DeparturesResponse:
    """Parse a ``/departures/route_type/{type}/stop/{stop}`` response."""
    departures = []
    for item in data.get("departures") or []:
        scheduled = item.get("scheduled_departure_utc")
        if not scheduled or item.get("run_ref") is None:
            logger.debug(f"Skipping departure without run or time: {item}")
            continue
        platform = item.get("platform_number")
        departures.append(
            TimetableDeparture(
                run_ref=str(item["run_ref"]),
                route_id=int(item.get("route_id", 0)),
                platform_number=None if platform is None else str(platform),
                scheduled_departure=_parse_time(scheduled),
            )
        )

    routes = {}
    for route_id, route in (data.get("routes") or {}).items():
        routes[int(route_id)] = RouteInfo(
            route_id=int(route_id),
            route_type=int(route.get("route_type", 0)),
            route_name=route.get("route_name") or "",
            route_gtfs_id=route.get("route_gtfs_id") or None,
        )

    return DeparturesResponse(departures=departures, runs=_parse_runs(data), routes=routes)


def parse_pattern(data: dict[str, Any]) -> PatternResponse:
    """Parse a ``/pattern/run/{run}/route_type/{type}`` response."""
    stops = []
    for item in data.get("departures") or []:
        skipped = [
            SkippedStop(stop_id=int(s["stop_id"]), stop_name=s.get("stop_name") or "")
            for s in item.get("skipped_stops") or []
        ]
        stops.append(
            PatternStop(
                stop_id=int(item["stop_id"]),
                departure_note=item.get("departure_note"),
                skipped_stops=skipped,
            )
        )

    stop_names = {
        int(stop_id): stop.get("stop_name") or ""
        for stop_id, stop in (data.get("stops") or {}).items()
    }

    return PatternResponse(stops=stops, stop_names=stop_names, runs=_parse_runs(data))


def parse_search(data: dict[str, Any]) -> list[Station]:
    """Parse the stops of a ``/search/{term}`` response."""
    return [
        Station(
            id=int(stop["stop_id"]),
            name=stop.get("stop_name") or "",
            suburb=stop.get("stop_suburb") or "",
        )
        for stop in data.get("stops") or []
        if stop.get("stop_id") is not None
    ]

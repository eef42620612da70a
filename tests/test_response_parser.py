"""Tests for parsing PTV timetable API responses."""

from datetime import UTC, datetime

from ptv_departures.adapters.ptv_api.response_parser import (
    parse_departures,
    parse_pattern,
    parse_search,
)
from ptv_departures.domain.models import Distributor, SkippedStop


def test_when_parsing_departures_then_runs_routes_and_platforms_are_read() -> None:
    """Given a departures response, when parsed, then departures, runs and routes are mapped."""
    data = {
        "departures": [
            {
                "stop_id": 1131,
                "route_id": 3,
                "run_ref": "948123",
                "platform_number": "2",
                "scheduled_departure_utc": "2024-05-01T09:10:00Z",
            },
            {
                "stop_id": 1131,
                "route_id": 3,
                "run_ref": "948125",
                "platform_number": None,
                "scheduled_departure_utc": "2024-05-01T09:20:00Z",
            },
            {"stop_id": 1131, "route_id": 3, "run_ref": "948127"},
        ],
        "runs": {
            "948123": {
                "run_ref": "948123",
                "route_id": 3,
                "route_type": 0,
                "final_stop_id": 1071,
                "destination_name": "Flinders Street",
                "interchange": {
                    "feeder": None,
                    "distributor": {"run_ref": "950001", "destination_name": "Frankston"},
                },
            }
        },
        "routes": {
            "3": {
                "route_type": 0,
                "route_id": 3,
                "route_name": "Craigieburn",
                "route_gtfs_id": "2-CGB",
            },
            "1823": {
                "route_type": 3,
                "route_id": 1823,
                "route_name": "Ballarat",
                "route_gtfs_id": "",
            },
        },
    }

    result = parse_departures(data)

    assert len(result.departures) == 2
    first, second = result.departures
    assert first.run_ref == "948123"
    assert first.platform_number == "2"
    assert first.scheduled_departure == datetime(2024, 5, 1, 9, 10, tzinfo=UTC)
    assert second.platform_number is None
    run = result.runs["948123"]
    assert run.final_stop_id == 1071
    assert run.distributor == Distributor(run_ref="950001", destination_name="Frankston")
    assert result.routes[3].route_gtfs_id == "2-CGB"
    assert result.routes[1823].route_gtfs_id is None
    assert result.routes[1823].route_type == 3


def test_when_run_has_no_interchange_then_no_distributor() -> None:
    """Given a run without interchange data, when parsed, then it carries no distributor."""
    data = {
        "departures": [],
        "runs": {
            "1": {"run_ref": "1", "route_id": 3, "final_stop_id": 1071, "interchange": None},
            "2": {"run_ref": "2", "route_id": 3, "interchange": {"distributor": None}},
        },
    }

    result = parse_departures(data)

    assert result.runs["1"].distributor is None
    assert result.runs["2"].distributor is None
    assert result.runs["1"].destination_name == ""


def test_when_parsing_pattern_then_stops_notes_and_skipped_stops_are_read() -> None:
    """Given a pattern response, when parsed, then stops keep order, notes and skipped stops."""
    data = {
        "departures": [
            {"stop_id": 1131, "departure_note": "Express", "skipped_stops": []},
            {
                "stop_id": 1108,
                "departure_note": "",
                "skipped_stops": [{"stop_id": 1144, "stop_name": "North Melbourne Station"}],
            },
            {"stop_id": 1181},
        ],
        "stops": {
            "1131": {"stop_id": 1131, "stop_name": "Moonee Ponds"},
            "1108": {"stop_id": 1108, "stop_name": "Kensington"},
            "1181": {"stop_id": 1181, "stop_name": "Southern Cross"},
        },
        "runs": {"948123": {"run_ref": "948123", "route_id": 3, "final_stop_id": 1181}},
    }

    result = parse_pattern(data)

    assert [stop.stop_id for stop in result.stops] == [1131, 1108, 1181]
    assert result.stops[0].departure_note == "Express"
    assert result.stops[1].skipped_stops == [
        SkippedStop(stop_id=1144, stop_name="North Melbourne Station")
    ]
    assert result.stops[2].skipped_stops == []
    assert result.stop_names[1181] == "Southern Cross"
    assert "948123" in result.runs


def test_when_parsing_search_then_stops_become_stations() -> None:
    """Given a search response, when parsed, then each stop becomes a station."""
    data = {
        "stops": [
            {"stop_id": 1162, "stop_name": "Richmond Station", "stop_suburb": "Richmond"},
            {"stop_name": "No id"},
        ],
        "routes": [],
    }

    result = parse_search(data)

    assert len(result) == 1
    assert result[0].id == 1162
    assert result[0].name == "Richmond Station"
    assert result[0].suburb == "Richmond"


def test_when_response_is_empty_then_nothing_is_parsed() -> None:
    """Given empty payloads, when parsed, then empty results are returned."""
    assert parse_departures({}).departures == []
    assert parse_pattern({}).stops == []
    assert parse_search({}) == []

"""Classifies a stopping pattern into a service-type subtitle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ptv_departures.application.services.stop_names import shorten_name

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ptv_departures.domain.models.stop import Stop

EXPRESS_MIN_SKIPPED = 4


def classify_pattern(stations: Sequence[Stop], note: str = "") -> str:
    """Describe how a service runs, e.g. "Stops all" or "Express".

    A leg is a run of consecutive skipped stops. Any departure note is
    appended to the classification.

    Args:
        stations: Resolved stop list of the departure.
        note: Departure note captured at the home station.
    """
    skipped_stops: list[Stop] = []
    skipped_legs = 0
    in_leg = False
    for stop in stations:
        if stop.skipped and not in_leg:
            skipped_legs += 1
        in_leg = stop.skipped
        if stop.skipped:
            skipped_stops.append(stop)

    if not skipped_legs:
        subtitle = "Stops all"
    elif skipped_legs > 1:
        subtitle = "Ltd express"
    elif len(skipped_stops) == 1:
        if note:
            subtitle = "Ltd express"
        else:
            subtitle = f"Not stopping at {shorten_name(skipped_stops[0].name)}"
    else:
        subtitle = "Express" if len(skipped_stops) >= EXPRESS_MIN_SKIPPED else "Ltd express"

    subtitle = f"{subtitle} {note}".strip()
    return subtitle[:1].upper() + subtitle[1:]

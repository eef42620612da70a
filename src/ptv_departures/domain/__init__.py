"""Domain layer - core business logic and models."""

from ptv_departures.domain.models import (
    BoardState,
    Departure,
    NetworkConfiguration,
    Station,
    Stop,
)
from ptv_departures.domain.ports import TimetableRepository

__all__ = [
    "BoardState",
    "Departure",
    "NetworkConfiguration",
    "Station",
    "Stop",
    "TimetableRepository",
]

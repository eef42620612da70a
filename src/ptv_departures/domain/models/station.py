"""Station domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Station:
    """Represents the station the board is built for."""

    id: int
    name: str
    suburb: str = ""

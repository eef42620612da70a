"""Stop domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Stop:
    """A stop on a departure's remaining route."""

    id: int
    name: str
    skipped: bool = False
